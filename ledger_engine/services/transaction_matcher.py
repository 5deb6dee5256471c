"""
Transaction matcher.

Finds existing entries or statement lines that could be the same
real-world payment as a target amount and date. Only magnitudes
are compared: whether the target is money in or money out is
for the caller to decide from context.
"""

from collections.abc import Sequence
from datetime import date

from ledger_engine.engine_config import EngineConfig
from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import (
    BankStatementLine,
    LedgerEntrySnapshot,
    MatchCandidate,
)


class TransactionMatcher:

    def __init__(self, config: EngineConfig):
        self.config = config

    def find_matches(
        self,
        target_amount: Money,
        target_date: date,
        candidates: Sequence[LedgerEntrySnapshot | BankStatementLine],
        amount_tolerance: int | None = None,
        date_tolerance_days: int | None = None,
    ) -> list[MatchCandidate]:
        """
        Return candidates within tolerance, closest first.

        A candidate is included when both its amount delta and its
        day delta are within tolerance (inclusive). Results are
        ordered by amount delta, then day delta; equal distances
        keep their input order. Candidates in another currency are
        skipped. An empty list means nothing matched.

        Tolerances default to the engine configuration.
        """
        if amount_tolerance is None:
            amount_tolerance = self.config.amount_tolerance
        if date_tolerance_days is None:
            date_tolerance_days = self.config.date_tolerance_days
        if amount_tolerance < 0 or date_tolerance_days < 0:
            raise ValueError("tolerances must be non-negative")

        target_magnitude = abs(target_amount.amount)
        matches = []
        for index, candidate in enumerate(candidates):
            if candidate.amount.currency != target_amount.currency:
                continue

            amount_delta = abs(abs(candidate.amount.amount) - target_magnitude)
            if amount_delta > amount_tolerance:
                continue

            day_delta = abs((candidate.entry_date - target_date).days)
            if day_delta > date_tolerance_days:
                continue

            matches.append(MatchCandidate(
                index=index,
                candidate=candidate,
                amount_delta=amount_delta,
                day_delta=day_delta,
            ))

        # sorted() is stable, so ties stay in input order
        return sorted(matches, key=lambda m: (m.amount_delta, m.day_delta))
