"""
Ledger account model (chart of accounts).

Codes use the ledger's own form: a four-digit root, optionally
followed by a sub-ledger suffix ("6540", "1920:10001").
Bank and cash accounts are ordinary rows here; what makes
them monetary is their root code.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_engine.models.base import Base


class LedgerAccount(Base):
    """
    A single account in the chart of accounts.

    Once created with entries, an account is never deleted,
    only deactivated via is_active=False.
    """

    __tablename__ = "ledger_accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="account"
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} {self.name!r}>"
