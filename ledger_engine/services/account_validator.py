"""
Account address validation.

Bank and cash accounts ("monetary control" accounts) exist once
per real instrument, so the ledger addresses them by root plus
sub-ledger suffix: "1920:10001". A bare "1920" names the control
account, not an instrument, and cannot be posted to. That case
gets its own reason so the caller knows to look the instrument
up instead of picking a different account.
"""

import re

from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.enums import AccountClass, MalformedReason


ACCOUNT_CODE_PATTERN = re.compile(r"(?P<root>[0-9]{4})(?::(?P<suffix>[A-Za-z0-9]+))?")


class AccountAddressValidator:

    def __init__(self, config: EngineConfig):
        self.config = config

    def diagnose(self, account: str) -> MalformedReason | None:
        """Return why account is malformed, or None if it is usable."""
        match = ACCOUNT_CODE_PATTERN.fullmatch(account)
        if match is None:
            return MalformedReason.INVALID_CODE
        root = int(match.group("root"))
        if self.config.is_monetary_root(root) and match.group("suffix") is None:
            return MalformedReason.MISSING_SUBLEDGER
        return None

    def classify(self, account: str) -> AccountClass:
        if self.diagnose(account) is not None:
            return AccountClass.MALFORMED
        if self.is_monetary(account):
            return AccountClass.MONETARY_CONTROL
        return AccountClass.PLAIN

    def is_monetary(self, account: str) -> bool:
        """True if account's root lies in the bank/cash range, suffix or not."""
        match = ACCOUNT_CODE_PATTERN.fullmatch(account)
        if match is None:
            return False
        return self.config.is_monetary_root(int(match.group("root")))

    def is_bare_monetary_root(self, account: str) -> bool:
        return self.diagnose(account) == MalformedReason.MISSING_SUBLEDGER

    @staticmethod
    def describe(account: str, reason: MalformedReason) -> str:
        """Human-readable explanation for a malformed account."""
        if reason == MalformedReason.MISSING_SUBLEDGER:
            return (
                f"Bank account '{account}' is missing its sub-ledger suffix. "
                f"Use the full code, e.g. '{account}:10001', from the list "
                f"of bank accounts."
            )
        return f"'{account}' is not a valid account code"
