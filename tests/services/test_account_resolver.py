"""
Tests for bank account resolution.
"""

import pytest

from ledger_engine.schemas.posting import MonetaryAccount
from ledger_engine.schemas.results import (
    AmbiguousSelection,
    NoAccountAvailable,
    SingleAccount,
)
from ledger_engine.services.account_resolver import MonetaryAccountResolver


@pytest.fixture
def resolver(config):
    return MonetaryAccountResolver(config)


class TestAutoSelect:

    def test_single_active_account_is_selected(self, resolver, operating_account):
        result = resolver.resolve([operating_account])
        assert isinstance(result, SingleAccount)
        assert result.account.code == "1920:0001"

    def test_inactive_accounts_are_ignored(self, resolver, operating_account, savings_account):
        closed = savings_account.model_copy(update={"active": False})
        result = resolver.resolve([operating_account, closed])
        assert isinstance(result, SingleAccount)
        assert result.account == operating_account

    def test_two_active_accounts_are_ambiguous(self, resolver, operating_account, savings_account):
        result = resolver.resolve([operating_account, savings_account])
        assert isinstance(result, AmbiguousSelection)
        assert result.options == (operating_account, savings_account)

    def test_no_accounts(self, resolver):
        assert isinstance(resolver.resolve([]), NoAccountAvailable)

    def test_only_inactive_accounts(self, resolver, operating_account):
        closed = operating_account.model_copy(update={"active": False})
        assert isinstance(resolver.resolve([closed]), NoAccountAvailable)


class TestExplicitChoice:

    def test_explicit_choice_wins_over_ambiguity(self, resolver, operating_account, savings_account):
        result = resolver.resolve([operating_account, savings_account], "1920:0002")
        assert isinstance(result, SingleAccount)
        assert result.account == savings_account

    def test_explicit_choice_outside_the_main_bank_root(self, resolver, operating_account):
        other = MonetaryAccount(code="1950:0001", label="Tax deduction account")
        result = resolver.resolve([operating_account, other], "1950:0001")
        assert result.account == other

    def test_inactive_explicit_choice_is_not_used(self, resolver, operating_account, savings_account):
        closed = savings_account.model_copy(update={"active": False})
        result = resolver.resolve([operating_account, closed], "1920:0002")
        assert isinstance(result, SingleAccount)
        assert result.account == operating_account

    def test_unknown_choice_falls_back_to_ambiguity(self, resolver, operating_account, savings_account):
        result = resolver.resolve([operating_account, savings_account], "1920:9999")
        assert isinstance(result, AmbiguousSelection)
        assert len(result.options) == 2


class TestBareRootChoice:

    def test_bare_root_with_one_instrument_resolves(self, resolver, operating_account):
        cash = MonetaryAccount(code="1900:0001", label="Cash")
        result = resolver.resolve([operating_account, cash], "1920")
        assert isinstance(result, SingleAccount)
        assert result.account == operating_account

    def test_bare_root_with_two_instruments_asks(self, resolver, operating_account, savings_account):
        cash = MonetaryAccount(code="1900:0001", label="Cash")
        result = resolver.resolve([operating_account, savings_account, cash], "1920")
        assert isinstance(result, AmbiguousSelection)
        assert result.options == (operating_account, savings_account)
