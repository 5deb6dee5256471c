"""Engine services."""

from ledger_engine.services.account_resolver import MonetaryAccountResolver
from ledger_engine.services.account_validator import AccountAddressValidator
from ledger_engine.services.ledger_service import LedgerService
from ledger_engine.services.posting_balancer import PostingBalancer
from ledger_engine.services.reconciliation_service import ReconciliationService
from ledger_engine.services.transaction_matcher import TransactionMatcher

__all__ = [
    "AccountAddressValidator",
    "LedgerService",
    "MonetaryAccountResolver",
    "PostingBalancer",
    "ReconciliationService",
    "TransactionMatcher",
]
