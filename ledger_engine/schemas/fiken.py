"""
Boundary schemas for Fiken API payloads.

The API returns loosely-typed JSON (camelCase, optional fields,
signed amounts). Every payload is validated here and converted
into the engine's own types before it goes any further.
"""

from collections.abc import Callable
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ledger_engine.models.enums import EntryType
from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import (
    LedgerEntryLine,
    LedgerEntrySnapshot,
    MonetaryAccount,
    Posting,
)


class _FikenModel(BaseModel):
    # Unknown fields are ignored; Fiken adds fields over time.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FikenBankAccount(_FikenModel):
    bank_account_id: int | None = Field(default=None, alias="bankAccountId")
    name: str
    account_code: str = Field(alias="accountCode")
    bank_account_number: str | None = Field(default=None, alias="bankAccountNumber")
    inactive: bool = False

    def to_monetary_account(self) -> MonetaryAccount:
        return MonetaryAccount(
            code=self.account_code,
            label=self.name,
            active=not self.inactive,
        )


class FikenJournalLine(_FikenModel):
    """
    A journal entry line as returned by GET.

    `account` is set on reads; the debit/credit fields are only
    used on writes but some responses echo them back.
    """
    amount: StrictInt = 0
    account: str | None = None
    debit_account: str | None = Field(default=None, alias="debitAccount")
    credit_account: str | None = Field(default=None, alias="creditAccount")

    @property
    def account_code(self) -> str | None:
        return self.account or self.debit_account or self.credit_account


class FikenJournalEntry(_FikenModel):
    journal_entry_id: int = Field(alias="journalEntryId")
    transaction_id: int | None = Field(default=None, alias="transactionId")
    entry_date: date = Field(alias="date")
    description: str | None = None
    lines: list[FikenJournalLine] = Field(default_factory=list)

    def to_snapshot(
        self, currency: str, is_monetary: Callable[[str], bool]
    ) -> LedgerEntrySnapshot:
        """Convert to a LedgerEntrySnapshot; credits are negative."""
        lines = tuple(
            LedgerEntryLine(
                account=line.account_code,
                amount=Money(amount=line.amount, currency=currency),
            )
            for line in self.lines
            if line.account_code
        )
        return LedgerEntrySnapshot.from_lines(
            entry_id=str(self.journal_entry_id),
            entry_date=self.entry_date,
            description=self.description or "",
            lines=lines,
            is_monetary=is_monetary,
            currency=currency,
        )


def _vat_code(code: str) -> int | str:
    # Fiken expects numeric VAT codes as numbers
    return int(code) if code.isdigit() else code


def posting_to_fiken(posting: Posting) -> dict:
    """Build the POST /generalJournalEntries request body."""
    lines = []
    for line in posting.lines:
        item: dict = {"amount": line.amount.amount}
        if line.entry_type == EntryType.DEBIT:
            item["debitAccount"] = line.account
            if line.vat_code is not None:
                item["debitVatCode"] = _vat_code(line.vat_code)
        else:
            item["creditAccount"] = line.account
            if line.vat_code is not None:
                item["creditVatCode"] = _vat_code(line.vat_code)
        lines.append(item)

    return {
        "journalEntries": [{
            "date": posting.entry_date.isoformat(),
            "description": posting.description,
            "lines": lines,
        }],
    }
