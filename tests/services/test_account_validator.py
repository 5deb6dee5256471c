"""
Tests for account address classification.
"""

import pytest

from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.enums import AccountClass, MalformedReason
from ledger_engine.services.account_validator import AccountAddressValidator


@pytest.fixture
def validator(config):
    return AccountAddressValidator(config)


class TestClassify:

    @pytest.mark.parametrize("account", ["6540", "3000", "2400:20001", "1500:10001"])
    def test_plain_accounts(self, validator, account):
        assert validator.classify(account) == AccountClass.PLAIN

    @pytest.mark.parametrize("account", ["1920:10001", "1900:1", "1999:abc"])
    def test_bank_accounts_with_suffix(self, validator, account):
        assert validator.classify(account) == AccountClass.MONETARY_CONTROL

    @pytest.mark.parametrize("account", [
        "1920", "", "expense", "192", "19200", "1920:", "1920:10 001",
        "6540\n", "1920:0001\n", "\u0661\u0669\u0662\u0660:0001", "\u0666\u0665\u0664\u0660",
    ])
    def test_malformed(self, validator, account):
        assert validator.classify(account) == AccountClass.MALFORMED


class TestDiagnose:

    def test_bare_bank_root_is_missing_subledger(self, validator):
        assert validator.diagnose("1920") == MalformedReason.MISSING_SUBLEDGER

    def test_garbage_is_invalid_code(self, validator):
        assert validator.diagnose("bank-1920") == MalformedReason.INVALID_CODE

    def test_usable_account_has_no_diagnosis(self, validator):
        assert validator.diagnose("1920:10001") is None
        assert validator.diagnose("6540") is None

    def test_missing_subledger_message_names_the_remedy(self, validator):
        message = validator.describe("1920", MalformedReason.MISSING_SUBLEDGER)
        assert "sub-ledger" in message
        assert "1920:10001" in message

    def test_invalid_code_message_differs(self, validator):
        missing = validator.describe("1920", MalformedReason.MISSING_SUBLEDGER)
        invalid = validator.describe("1920", MalformedReason.INVALID_CODE)
        assert missing != invalid


class TestMonetaryRange:

    def test_is_monetary_ignores_suffix(self, validator):
        assert validator.is_monetary("1920")
        assert validator.is_monetary("1920:10001")
        assert not validator.is_monetary("6540")
        assert not validator.is_monetary("not-a-code")
        assert not validator.is_monetary("\u0661\u0669\u0662\u0660")

    def test_is_bare_monetary_root(self, validator):
        assert validator.is_bare_monetary_root("1920")
        assert not validator.is_bare_monetary_root("1920:10001")
        assert not validator.is_bare_monetary_root("6540")

    def test_custom_range(self):
        validator = AccountAddressValidator(EngineConfig(monetary_ranges=((1500, 1599),)))
        assert validator.classify("1500") == AccountClass.MALFORMED
        assert validator.classify("1920") == AccountClass.PLAIN

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError, match="invalid monetary range"):
            EngineConfig(monetary_ranges=((1999, 1900),))
