"""
Journal entry and ledger line models.

A journal entry is one accepted posting: a date, a description
and an ordered set of lines. Each line is one half of the
double entry. Rows are immutable once written; a correction
is a new, offsetting journal entry.
"""

from datetime import date, datetime, timezone

from sqlalchemy import (
    BigInteger, Date, DateTime, ForeignKey, Integer, String,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_engine.models.base import Base
from ledger_engine.models.enums import EntryType


class JournalEntry(Base):
    """
    An accepted posting.

    The id is the opaque posting identifier handed back to
    callers. idempotency_key is optional; when present it is
    unique, so a retried submission finds the original entry.
    """

    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(160), nullable=False)
    idempotency_key: Mapped[str | None] = mapped_column(
        String(100), nullable=True, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    lines: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="journal_entry",
        order_by="LedgerEntry.line_number",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.entry_date}>"


class LedgerEntry(Base):
    """
    One debit or credit line of a journal entry.

    amount is a non-negative integer in minor units; the
    direction lives in entry_type. Within a journal entry the
    DEBIT total equals the CREDIT total per currency. That
    invariant is enforced by the LedgerService, not by the model.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum"),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    vat_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    journal_entry: Mapped[JournalEntry] = relationship(
        back_populates="lines"
    )
    account: Mapped["LedgerAccount"] = relationship(
        back_populates="entries"
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.entry_type.value} "
            f"{self.amount} {self.currency}>"
        )
