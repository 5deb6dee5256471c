"""
Pydantic schemas for reconciliation requests and reports.
"""

from datetime import date

from pydantic import BaseModel, Field

from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import (
    BankStatementLine,
    LedgerEntrySnapshot,
    MatchCandidate,
    MonetaryAccount,
    Posting,
)


# --- Statement reconciliation report ---

class StatementMatch(BaseModel):
    """A statement line paired with the booked entry it matched."""
    statement_index: int
    statement_line: BankStatementLine
    entry: LedgerEntrySnapshot
    amount_delta: int
    day_delta: int


class UnmatchedLine(BaseModel):
    """A statement line with no booked counterpart; it needs booking."""
    statement_index: int
    statement_line: BankStatementLine


class StatementReconciliation(BaseModel):
    matched: list[StatementMatch]
    unmatched: list[UnmatchedLine]
    booked_entries_count: int

    @property
    def total_count(self) -> int:
        return len(self.matched) + len(self.unmatched)


# --- API request schemas ---

class ReconcileRequest(BaseModel):
    """
    A posting to validate, de-duplicate and submit.

    known_accounts and recent_entries are optional snapshots; when
    omitted they are read from the ledger.
    """
    posting: Posting
    explicit_account: str | None = None
    known_accounts: list[MonetaryAccount] | None = None
    recent_entries: list[LedgerEntrySnapshot] | None = None


class FindMatchesRequest(BaseModel):
    amount: Money
    entry_date: date
    amount_tolerance: int | None = Field(default=None, ge=0)
    date_tolerance_days: int | None = Field(default=None, ge=0)


class FindMatchesResponse(BaseModel):
    match_count: int
    matches: list[MatchCandidate]


class StatementRequest(BaseModel):
    period_from: date
    period_to: date
    lines: list[BankStatementLine] = Field(min_length=1)
    account_code: str | None = None
