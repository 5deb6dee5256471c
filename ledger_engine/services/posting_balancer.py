"""
Posting balancer.

Checks that a proposed posting could be accepted by a
double-entry ledger:
1. It has at least one line
2. Every line has a positive amount and a usable account
3. Total debits equal total credits, per currency

The first failure is returned as a typed result. A posting is
either entirely valid or rejected; there is no partial success.
"""

import logging
from collections import defaultdict

from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.enums import EntryType
from ledger_engine.schemas.posting import Posting
from ledger_engine.schemas.results import (
    BalanceError,
    EmptyPosting,
    InvalidAmount,
    MalformedAccount,
    Ok,
    ValidationResult,
)
from ledger_engine.services.account_validator import AccountAddressValidator

logger = logging.getLogger(__name__)


class PostingBalancer:

    def __init__(self, config: EngineConfig):
        self.config = config
        self.validator = AccountAddressValidator(config)

    def validate(self, posting: Posting) -> ValidationResult:
        """
        Validate a posting without submitting it.

        Lines whose account is still None (settlement leg not yet
        resolved) are checked for amount and balance but skip
        address validation.

        Raises TypeError if posting is None; that is a bug in the
        caller, not a business outcome.
        """
        if posting is None:
            raise TypeError("validate() requires a Posting, got None")

        if not posting.lines:
            return EmptyPosting()

        for index, line in enumerate(posting.lines):
            if line.amount.amount <= 0:
                return InvalidAmount(
                    line_index=index,
                    amount=line.amount.amount,
                    message=(
                        f"Line {index + 1}: amount must be positive "
                        f"({line.amount.amount}). Use the entry type to "
                        f"set the direction."
                    ),
                )
            if line.is_pending:
                continue
            reason = self.validator.diagnose(line.account)
            if reason is not None:
                return MalformedAccount(
                    line_index=index,
                    account=line.account,
                    reason=reason,
                    message=(
                        f"Line {index + 1}: "
                        f"{self.validator.describe(line.account, reason)}"
                    ),
                )

        # --- Enforce balance rule ---
        debits: dict[str, int] = defaultdict(int)
        credits: dict[str, int] = defaultdict(int)
        for line in posting.lines:
            if line.entry_type == EntryType.DEBIT:
                debits[line.amount.currency] += line.amount.amount
            else:
                credits[line.amount.currency] += line.amount.amount

        for currency in sorted(set(debits) | set(credits)):
            total_debits = debits[currency]
            total_credits = credits[currency]
            if total_debits != total_credits:
                difference = total_debits - total_credits
                logger.debug(
                    "Posting does not balance in %s: debits=%d credits=%d",
                    currency, total_debits, total_credits,
                )
                return BalanceError(
                    currency=currency,
                    debit_total=total_debits,
                    credit_total=total_credits,
                    difference=difference,
                    message=(
                        f"Posting does not balance in {currency}: "
                        f"debits={total_debits}, credits={total_credits}, "
                        f"difference={abs(difference)}"
                    ),
                )

        return Ok()
