"""
Reconciliation service: the only part of the engine that talks
to the ledger.

reconcile() runs every proposed posting through the same steps:
1. Validate the posting locally (balance, amounts, account codes)
2. Resolve the bank account for an unassigned settlement line
3. Check recent ledger entries for a likely duplicate
4. Submit to the ledger

Cheap local checks run before any network call. Submission is
the only step with a side effect; it happens last and at most
once per call. Every outcome is returned as a typed result.
"""

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from ledger_engine.clients.base import (
    LedgerCollaborator,
    LedgerError,
    LedgerRejectedError,
)
from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.enums import CollaboratorStage, EntryType, RejectionReason
from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import (
    BankStatementLine,
    LedgerEntrySnapshot,
    MatchCandidate,
    MonetaryAccount,
    Posting,
)
from ledger_engine.schemas.reconciliation import (
    StatementMatch,
    StatementReconciliation,
    UnmatchedLine,
)
from ledger_engine.schemas.results import (
    Accepted,
    AmbiguousSelection,
    CollaboratorUnavailable,
    NeedsDisambiguation,
    NoAccountAvailable,
    ReconcileResult,
    Rejected,
)
from ledger_engine.services.account_resolver import MonetaryAccountResolver
from ledger_engine.services.account_validator import AccountAddressValidator
from ledger_engine.services.posting_balancer import PostingBalancer
from ledger_engine.services.transaction_matcher import TransactionMatcher

logger = logging.getLogger(__name__)


class ReconciliationService:

    def __init__(self, ledger: LedgerCollaborator, config: EngineConfig):
        self.ledger = ledger
        self.config = config
        self.validator = AccountAddressValidator(config)
        self.balancer = PostingBalancer(config)
        self.resolver = MonetaryAccountResolver(config)
        self.matcher = TransactionMatcher(config)

    def _window(self, around: date) -> tuple[date, date]:
        days = timedelta(days=self.config.date_tolerance_days)
        return around - days, around + days

    def settlement_amount(self, posting: Posting) -> Money:
        """
        The amount a bank statement would show for this posting.

        That is the total on bank/cash lines (including the unassigned
        settlement leg), or the debit total when no line touches a
        bank account.
        """
        currency = posting.lines[0].amount.currency
        monetary = [
            line for line in posting.lines
            if line.amount.currency == currency
            and (line.is_pending or self.validator.is_monetary(line.account))
        ]
        if monetary:
            # A transfer between two bank accounts counts once
            debits = sum(line.amount.amount for line in monetary if line.entry_type == EntryType.DEBIT)
            credits = sum(line.amount.amount for line in monetary if line.entry_type == EntryType.CREDIT)
            amount = max(debits, credits)
        else:
            amount = posting.debit_total(currency)
        return Money(amount=amount, currency=currency)

    def reconcile(
        self,
        posting: Posting,
        known_accounts: Sequence[MonetaryAccount] | None = None,
        recent_entries: Sequence[LedgerEntrySnapshot] | None = None,
        explicit_account: str | None = None,
    ) -> ReconcileResult:
        """
        Validate, resolve, de-duplicate and submit one posting.

        known_accounts and recent_entries are snapshots the caller
        may already hold; when None they are read from the ledger.
        """
        if posting is None:
            raise TypeError("reconcile() requires a Posting, got None")

        # --- 1. Local validation ---
        validation = self.balancer.validate(posting)
        if not validation.ok:
            return Rejected(
                reason=RejectionReason.INVALID_POSTING,
                message=validation.message,
                error=validation,
            )

        # --- 2. Resolve the settlement account ---
        resolved_account = None
        if posting.pending_lines:
            if known_accounts is None:
                try:
                    known_accounts = self.ledger.list_monetary_accounts()
                except LedgerError as e:
                    logger.warning("Could not list bank accounts: %s", e)
                    return CollaboratorUnavailable(
                        stage=CollaboratorStage.LIST_ACCOUNTS,
                        outcome_unknown=False,
                        message=str(e),
                    )

            resolution = self.resolver.resolve(known_accounts, explicit_account)
            if isinstance(resolution, AmbiguousSelection):
                return NeedsDisambiguation(options=resolution.options)
            if isinstance(resolution, NoAccountAvailable):
                return Rejected(
                    reason=RejectionReason.NO_ACCOUNT_AVAILABLE,
                    message=resolution.message,
                )

            resolved_account = resolution.account.code
            posting = posting.with_account(resolved_account)

            # The ledger's own account list may contain a bare root
            validation = self.balancer.validate(posting)
            if not validation.ok:
                return Rejected(
                    reason=RejectionReason.INVALID_POSTING,
                    message=validation.message,
                    error=validation,
                )

        # --- 3. Duplicate check ---
        target = self.settlement_amount(posting)
        if recent_entries is None:
            date_from, date_to = self._window(posting.entry_date)
            try:
                recent_entries = self.ledger.query_recent_entries(date_from, date_to)
            except LedgerError as e:
                logger.warning("Could not query recent entries: %s", e)
                return CollaboratorUnavailable(
                    stage=CollaboratorStage.QUERY_ENTRIES,
                    outcome_unknown=False,
                    message=str(e),
                )

        matches = self.matcher.find_matches(target, posting.entry_date, recent_entries)
        if matches:
            best = matches[0]
            logger.info(
                "Likely duplicate of entry %s (amount delta %d, %d days)",
                best.candidate.entry_id, best.amount_delta, best.day_delta,
            )
            return Rejected(
                reason=RejectionReason.LIKELY_DUPLICATE,
                message=(
                    f"A similar entry already exists: {best.candidate.entry_id} "
                    f"dated {best.candidate.entry_date} for {best.candidate.amount}"
                ),
                duplicate=best,
            )

        # --- 4. Submit ---
        try:
            posting_id = self.ledger.submit_posting(posting)
        except LedgerRejectedError as e:
            return Rejected(reason=RejectionReason.LEDGER_REJECTED, message=str(e))
        except LedgerError as e:
            # Anything short of a clear refusal may have been recorded
            logger.warning("Submission outcome unknown: %s", e)
            return CollaboratorUnavailable(
                stage=CollaboratorStage.SUBMIT,
                outcome_unknown=True,
                message=(
                    f"{e}. The posting may have been recorded; look for "
                    f"{target} on {posting.entry_date} before retrying."
                ),
            )

        logger.info("Posting accepted as %s", posting_id)
        return Accepted(posting_id=posting_id, account=resolved_account)

    def find_existing(
        self,
        amount: Money,
        entry_date: date,
        amount_tolerance: int | None = None,
        date_tolerance_days: int | None = None,
    ) -> list[MatchCandidate]:
        """
        Does this expense already exist in the ledger?

        Returns booked entries near amount/date, closest first. Raises
        LedgerError if the ledger cannot be queried, since
        an empty list here must mean "nothing found".
        """
        days = self.config.date_tolerance_days if date_tolerance_days is None else date_tolerance_days
        window = timedelta(days=days)
        entries = self.ledger.query_recent_entries(entry_date - window, entry_date + window)
        return self.matcher.find_matches(
            amount, entry_date, entries,
            amount_tolerance=amount_tolerance,
            date_tolerance_days=days,
        )

    def reconcile_statement(
        self,
        statement_lines: Sequence[BankStatementLine],
        period_from: date,
        period_to: date,
        booked_entries: Sequence[LedgerEntrySnapshot] | None = None,
        account_code: str | None = None,
    ) -> StatementReconciliation:
        """
        Match each statement line to at most one booked entry.

        Lines are processed in statement order; each takes the best
        ranked entry not already claimed by an earlier line. Lines
        left over are the ones that still need booking.
        """
        if booked_entries is None:
            date_from, _ = self._window(period_from)
            _, date_to = self._window(period_to)
            booked_entries = self.ledger.query_recent_entries(date_from, date_to)

        if account_code:
            booked_entries = [
                entry for entry in booked_entries
                if entry.touches_account(account_code)
            ]

        claimed: set[int] = set()
        matched = []
        unmatched = []
        for index, line in enumerate(statement_lines):
            candidates = [
                m for m in self.matcher.find_matches(line.amount, line.entry_date, booked_entries)
                if m.index not in claimed
            ]
            if not candidates:
                unmatched.append(UnmatchedLine(statement_index=index, statement_line=line))
                continue

            best = candidates[0]
            claimed.add(best.index)
            matched.append(StatementMatch(
                statement_index=index,
                statement_line=line,
                entry=best.candidate,
                amount_delta=best.amount_delta,
                day_delta=best.day_delta,
            ))

        logger.info(
            "Statement %s to %s: %d matched, %d need booking",
            period_from, period_to, len(matched), len(unmatched),
        )
        return StatementReconciliation(
            matched=matched,
            unmatched=unmatched,
            booked_entries_count=len(booked_entries),
        )
