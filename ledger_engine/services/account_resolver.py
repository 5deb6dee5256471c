"""
Monetary account resolver.

Decides which bank/cash account a payment was made from:
1. An explicit choice that is an active known account wins
2. Otherwise, if exactly one active account exists, use it
3. Otherwise, return every active account and let the caller ask

It never picks between two real accounts on its own.
"""

import logging
from collections.abc import Sequence

from ledger_engine.engine_config import EngineConfig
from ledger_engine.schemas.posting import MonetaryAccount
from ledger_engine.schemas.results import (
    AmbiguousSelection,
    NoAccountAvailable,
    ResolveResult,
    SingleAccount,
)
from ledger_engine.services.account_validator import AccountAddressValidator

logger = logging.getLogger(__name__)


class MonetaryAccountResolver:

    def __init__(self, config: EngineConfig):
        self.validator = AccountAddressValidator(config)

    def resolve(
        self,
        known_accounts: Sequence[MonetaryAccount],
        explicit_choice: str | None = None,
    ) -> ResolveResult:
        active = [account for account in known_accounts if account.active]

        if explicit_choice:
            for account in active:
                if account.code == explicit_choice:
                    return SingleAccount(account=account)

            # A bare root such as "1920" narrows the choice to the
            # instruments under that root.
            if self.validator.is_bare_monetary_root(explicit_choice):
                under_root = [
                    account for account in active
                    if account.code.split(":")[0] == explicit_choice
                ]
                if len(under_root) == 1:
                    logger.info(
                        "Resolved bank account %s to %s",
                        explicit_choice, under_root[0].code,
                    )
                    return SingleAccount(account=under_root[0])
                if len(under_root) > 1:
                    return AmbiguousSelection(options=tuple(under_root))

            logger.warning(
                "Requested account %s is not an active bank account; "
                "falling back to the account list",
                explicit_choice,
            )

        if len(active) == 1:
            logger.info("Auto-selected the only active bank account %s", active[0].code)
            return SingleAccount(account=active[0])

        if len(active) > 1:
            return AmbiguousSelection(options=tuple(active))

        return NoAccountAvailable()
