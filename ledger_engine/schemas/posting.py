"""
Pydantic schemas for postings, accounts and bank statement lines.

These are the typed values the engine works on. Untyped ledger
payloads are converted into them at the collaborator boundary
(see schemas/fiken.py); the engine never handles raw dicts.
"""

from collections.abc import Callable
from datetime import date

from pydantic import BaseModel, Field

from ledger_engine.models.enums import EntryType
from ledger_engine.schemas.money import Money


DESCRIPTION_MAX_LENGTH = 160


class PostingLine(BaseModel):
    """
    One leg of a posting.

    The amount is non-negative; entry_type alone carries the sign.
    account=None marks the settlement leg whose bank/cash account
    has not been chosen yet. The reconciliation service fills it
    in before anything is submitted.
    """
    amount: Money
    entry_type: EntryType
    account: str | None = Field(default=None, max_length=20)
    vat_code: str | None = Field(default=None, max_length=20)

    model_config = {"frozen": True}

    @property
    def is_pending(self) -> bool:
        return self.account is None


class Posting(BaseModel):
    """A journal entry proposed for submission."""
    entry_date: date
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH)
    lines: tuple[PostingLine, ...]
    idempotency_key: str | None = Field(default=None, max_length=100)

    model_config = {"frozen": True}

    @property
    def pending_lines(self) -> list[int]:
        """Indexes of lines still waiting for their monetary account."""
        return [i for i, line in enumerate(self.lines) if line.is_pending]

    def with_account(self, account: str) -> "Posting":
        """Return a copy with every pending line set to account."""
        lines = tuple(
            line.model_copy(update={"account": account}) if line.is_pending else line
            for line in self.lines
        )
        return self.model_copy(update={"lines": lines})

    def debit_total(self, currency: str) -> int:
        return sum(
            line.amount.amount for line in self.lines
            if line.entry_type == EntryType.DEBIT
            and line.amount.currency == currency
        )


class MonetaryAccount(BaseModel):
    """A bank or cash account known to the ledger."""
    code: str
    label: str
    active: bool = True

    model_config = {"frozen": True}


class BankStatementLine(BaseModel):
    """
    One line from an imported bank statement.

    Statements are signed (negative = money out), but matching
    only ever compares magnitudes.
    """
    amount: Money
    entry_date: date
    description: str = ""

    model_config = {"frozen": True}


class LedgerEntryLine(BaseModel):
    """A line of an existing ledger entry, amount signed (credit < 0)."""
    account: str
    amount: Money

    model_config = {"frozen": True}


class LedgerEntrySnapshot(BaseModel):
    """
    An entry already recorded in the ledger, as returned by
    query_recent_entries.

    amount is the magnitude that a bank statement line would
    show for this entry.
    """
    entry_id: str
    amount: Money
    entry_date: date
    description: str = ""
    lines: tuple[LedgerEntryLine, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_lines(
        cls,
        entry_id: str,
        entry_date: date,
        description: str,
        lines: tuple[LedgerEntryLine, ...],
        is_monetary: Callable[[str], bool],
        currency: str,
    ) -> "LedgerEntrySnapshot":
        """
        Build a snapshot from signed lines.

        The snapshot amount is the bank/cash side of the entry, or
        the debit total if the entry never touches a bank account.
        A transfer between two bank accounts has both sides on
        monetary lines, so only one side is counted.
        """
        monetary = [line.amount.amount for line in lines if is_monetary(line.account)]
        if monetary:
            amount = max(
                sum(a for a in monetary if a > 0),
                -sum(a for a in monetary if a < 0),
            )
        else:
            amount = sum(line.amount.amount for line in lines if line.amount.amount > 0)
        return cls(
            entry_id=entry_id,
            amount=Money(amount=amount, currency=currency),
            entry_date=entry_date,
            description=description,
            lines=lines,
        )

    def touches_account(self, code: str) -> bool:
        """
        True if any line is on code, or on the same root when
        code is given without a sub-ledger suffix.
        """
        root = code.split(":")[0]
        for line in self.lines:
            if line.account == code:
                return True
            if ":" not in code and line.account.split(":")[0] == root:
                return True
        return False


class MatchCandidate(BaseModel):
    """
    A candidate paired with its distance from the target.

    index is the candidate's position in the input sequence.
    """
    index: int
    candidate: LedgerEntrySnapshot | BankStatementLine
    amount_delta: int
    day_delta: int

    model_config = {"frozen": True}
