"""
Local ledger service.

A self-contained double-entry ledger stored through SQLAlchemy.
It implements the same collaborator interface as the Fiken
client, so the engine can run end-to-end without a remote
ledger. Like any real ledger it enforces its own rules on
submission:
1. Every line names an existing, active account
2. Every posting balances (debits = credits, per currency)
3. Entries are immutable (append-only)
4. A repeated idempotency key returns the original entry

The caller controls the transaction boundary and decides when
to commit or rollback.
"""

import logging
from collections import defaultdict
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, selectinload

from ledger_engine.clients.base import LedgerRejectedError, LedgerUnavailableError
from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.enums import EntryType
from ledger_engine.models.ledger_account import LedgerAccount
from ledger_engine.models.ledger_entry import JournalEntry, LedgerEntry
from ledger_engine.schemas.ledger import LedgerAccountCreate
from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import (
    LedgerEntryLine,
    LedgerEntrySnapshot,
    MonetaryAccount,
    Posting,
)
from ledger_engine.services.account_validator import AccountAddressValidator

logger = logging.getLogger(__name__)


class LedgerService:
    """
    All local ledger operations pass through this service.

    The service takes a database session as a constructor
    argument. Submitted postings are flushed, not committed.
    """

    def __init__(self, db: Session, config: EngineConfig):
        self.db = db
        self.config = config
        self.validator = AccountAddressValidator(config)

    # --- Chart of accounts ---

    def create_account(self, request: LedgerAccountCreate) -> LedgerAccount:
        """
        Create a new ledger account.

        Raises ValueError if the code is malformed or already exists.
        """
        reason = self.validator.diagnose(request.code)
        if reason is not None:
            raise ValueError(self.validator.describe(request.code, reason))

        existing = self.db.execute(
            select(LedgerAccount).where(LedgerAccount.code == request.code)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(f"Account with code '{request.code}' already exists")

        account = LedgerAccount(
            code=request.code,
            name=request.name,
            is_active=request.is_active,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def list_accounts(self) -> list[LedgerAccount]:
        accounts = self.db.execute(
            select(LedgerAccount).order_by(LedgerAccount.code)
        ).scalars().all()
        return list(accounts)

    def get_account_balance(self, code: str) -> int:
        """
        Calculate an account's balance from its entries.

        Balance is never stored; it is always derived from the
        entries. Returned as debits - credits in minor units.
        """
        account = self.db.execute(
            select(LedgerAccount).where(LedgerAccount.code == code)
        ).scalar_one_or_none()

        if not account:
            raise ValueError(f"Account {code} not found")

        totals = dict(self.db.execute(
            select(LedgerEntry.entry_type, func.coalesce(func.sum(LedgerEntry.amount), 0))
            .where(LedgerEntry.account_id == account.id)
            .group_by(LedgerEntry.entry_type)
        ).all())

        return int(totals.get(EntryType.DEBIT, 0)) - int(totals.get(EntryType.CREDIT, 0))

    # --- Ledger collaborator interface ---

    def list_monetary_accounts(self) -> list[MonetaryAccount]:
        """Every bank/cash account, active or not."""
        try:
            accounts = self.list_accounts()
        except OperationalError as e:
            raise LedgerUnavailableError(f"Ledger database unavailable: {e}") from e

        return [
            MonetaryAccount(code=a.code, label=a.name, active=a.is_active)
            for a in accounts
            if self.validator.is_monetary(a.code)
        ]

    def query_recent_entries(
        self, date_from: date, date_to: date
    ) -> list[LedgerEntrySnapshot]:
        """Entries dated within [date_from, date_to], oldest first."""
        try:
            journals = self.db.execute(
                select(JournalEntry)
                .where(
                    JournalEntry.entry_date >= date_from,
                    JournalEntry.entry_date <= date_to,
                )
                .options(
                    selectinload(JournalEntry.lines).selectinload(LedgerEntry.account)
                )
                .order_by(JournalEntry.entry_date, JournalEntry.id)
            ).scalars().all()
        except OperationalError as e:
            raise LedgerUnavailableError(f"Ledger database unavailable: {e}") from e

        return [self._snapshot(journal) for journal in journals]

    def submit_posting(self, posting: Posting) -> str:
        """
        Record a posting as an immutable journal entry.

        If any check fails, nothing is written. Raises
        LedgerRejectedError for rule violations and
        LedgerUnavailableError when the database fails mid-write.
        """
        try:
            return self._record_posting(posting)
        except (OperationalError, IntegrityError) as e:
            raise LedgerUnavailableError(f"Ledger database write failed: {e}") from e

    def _record_posting(self, posting: Posting) -> str:
        if posting.idempotency_key:
            existing = self.db.execute(
                select(JournalEntry).where(
                    JournalEntry.idempotency_key == posting.idempotency_key
                )
            ).scalar_one_or_none()
            if existing:
                logger.info(
                    "Idempotency key %s already used by entry %s",
                    posting.idempotency_key, existing.id,
                )
                return str(existing.id)

        if not posting.lines:
            raise LedgerRejectedError("Posting has no lines")
        if posting.pending_lines:
            raise LedgerRejectedError("Posting has lines without an account")

        # --- Validate all accounts ---
        codes = {line.account for line in posting.lines}
        accounts = self.db.execute(
            select(LedgerAccount).where(LedgerAccount.code.in_(codes))
        ).scalars().all()
        accounts_by_code = {a.code: a for a in accounts}

        missing = codes - set(accounts_by_code)
        if missing:
            raise LedgerRejectedError(f"Accounts not found: {sorted(missing)}")

        for account in accounts_by_code.values():
            if not account.is_active:
                raise LedgerRejectedError(f"Account {account.code} is not active")

        # --- Enforce balance rule ---
        sums: dict[str, int] = defaultdict(int)
        for line in posting.lines:
            if line.amount.amount <= 0:
                raise LedgerRejectedError("Line amounts must be positive")
            sign = 1 if line.entry_type == EntryType.DEBIT else -1
            sums[line.amount.currency] += sign * line.amount.amount
        for currency, net in sums.items():
            if net != 0:
                raise LedgerRejectedError(
                    f"Posting does not balance in {currency}: difference={net}"
                )

        # --- Create entries ---
        journal = JournalEntry(
            entry_date=posting.entry_date,
            description=posting.description,
            idempotency_key=posting.idempotency_key,
        )
        self.db.add(journal)
        self.db.flush()

        for number, line in enumerate(posting.lines, start=1):
            self.db.add(LedgerEntry(
                journal_entry_id=journal.id,
                line_number=number,
                account_id=accounts_by_code[line.account].id,
                entry_type=line.entry_type,
                amount=line.amount.amount,
                currency=line.amount.currency,
                vat_code=line.vat_code,
            ))

        self.db.flush()
        logger.info("Recorded journal entry %s (%d lines)", journal.id, len(posting.lines))
        return str(journal.id)

    def _snapshot(self, journal: JournalEntry) -> LedgerEntrySnapshot:
        """Convert a stored entry to its read shape; credits become negative."""
        lines = tuple(
            LedgerEntryLine(
                account=entry.account.code,
                amount=Money(
                    amount=entry.amount if entry.entry_type == EntryType.DEBIT else -entry.amount,
                    currency=entry.currency,
                ),
            )
            for entry in journal.lines
        )
        currency = lines[0].amount.currency if lines else self.config.currency
        return LedgerEntrySnapshot.from_lines(
            entry_id=str(journal.id),
            entry_date=journal.entry_date,
            description=journal.description,
            lines=lines,
            is_monetary=self.validator.is_monetary,
            currency=currency,
        )
