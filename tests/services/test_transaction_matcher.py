"""
Tests for duplicate and statement matching.
"""

from datetime import date

import pytest

from ledger_engine.schemas.money import Money
from ledger_engine.schemas.posting import BankStatementLine
from ledger_engine.services.transaction_matcher import TransactionMatcher
from builders import booked_entry, nok


@pytest.fixture
def matcher(config):
    return TransactionMatcher(config)


def statement_line(amount, day):
    return BankStatementLine(amount=nok(amount), entry_date=date(2026, 1, day), description="Card purchase")


class TestTolerance:

    def test_amount_outside_tolerance_is_excluded(self, matcher):
        matches = matcher.find_matches(
            nok(34950), date(2026, 1, 2), [statement_line(33950, 4)],
            amount_tolerance=500, date_tolerance_days=5,
        )
        assert matches == []

    def test_exact_amount_one_day_later_is_included(self, matcher):
        matches = matcher.find_matches(
            nok(34950), date(2026, 1, 2), [statement_line(34950, 3)],
            amount_tolerance=500, date_tolerance_days=5,
        )
        assert len(matches) == 1
        assert matches[0].amount_delta == 0
        assert matches[0].day_delta == 1

    def test_boundaries_are_inclusive(self, matcher):
        matches = matcher.find_matches(
            nok(1000), date(2026, 1, 10),
            [statement_line(1500, 15), statement_line(500, 5)],
            amount_tolerance=500, date_tolerance_days=5,
        )
        assert [m.index for m in matches] == [0, 1]

    def test_date_outside_window_is_excluded(self, matcher):
        matches = matcher.find_matches(
            nok(1000), date(2026, 1, 10), [statement_line(1000, 16)],
            amount_tolerance=0, date_tolerance_days=5,
        )
        assert matches == []

    def test_direction_is_ignored(self, matcher):
        matches = matcher.find_matches(nok(34950), date(2026, 1, 2), [statement_line(-34950, 2)])
        assert len(matches) == 1

    def test_other_currency_is_skipped(self, matcher):
        eur = BankStatementLine(amount=Money(amount=34950, currency="EUR"), entry_date=date(2026, 1, 2))
        assert matcher.find_matches(nok(34950), date(2026, 1, 2), [eur]) == []

    def test_negative_tolerance_raises(self, matcher):
        with pytest.raises(ValueError):
            matcher.find_matches(nok(1), date(2026, 1, 2), [], amount_tolerance=-1)

    def test_defaults_come_from_config(self, matcher):
        # 500 øre and 5 days by default
        assert len(matcher.find_matches(nok(1000), date(2026, 1, 10), [statement_line(1500, 15)])) == 1
        assert matcher.find_matches(nok(1000), date(2026, 1, 10), [statement_line(1501, 15)]) == []

    def test_stricter_tolerance_returns_a_subset(self, matcher):
        candidates = [statement_line(1000 + 37 * i, 1 + (i % 20)) for i in range(30)]
        loose = matcher.find_matches(nok(1300), date(2026, 1, 10), candidates, 800, 7)
        strict = matcher.find_matches(nok(1300), date(2026, 1, 10), candidates, 300, 3)
        assert strict
        assert {m.index for m in strict} < {m.index for m in loose}


class TestOrdering:

    def test_amount_delta_ranks_before_day_delta(self, matcher):
        matches = matcher.find_matches(
            nok(1000), date(2026, 1, 10),
            [statement_line(1100, 10), statement_line(1000, 14), statement_line(1000, 11)],
        )
        assert [m.index for m in matches] == [2, 1, 0]

    def test_ties_keep_input_order(self, matcher):
        matches = matcher.find_matches(
            nok(1000), date(2026, 1, 10),
            [statement_line(1000, 11), statement_line(1000, 9), statement_line(1000, 11)],
        )
        assert [m.index for m in matches] == [0, 1, 2]

    def test_repeated_calls_are_identical(self, matcher):
        candidates = [statement_line(1000 + i, 8 + (i % 5)) for i in range(12)]
        first = matcher.find_matches(nok(1005), date(2026, 1, 10), candidates)
        second = matcher.find_matches(nok(1005), date(2026, 1, 10), candidates)
        assert first == second

    def test_booked_entries_are_candidates_too(self, matcher):
        entries = [booked_entry("41", 45050, date(2024, 3, 14))]
        matches = matcher.find_matches(nok(45050), date(2024, 3, 15), entries)
        assert matches[0].candidate.entry_id == "41"
