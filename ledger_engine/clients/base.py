"""
The ledger collaborator interface.

The engine reads bank accounts and recent entries from the
ledger, and submits accepted postings to it. Anything that
provides these three operations can serve as the ledger: the
Fiken HTTP client, or the local SQL ledger.
"""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from ledger_engine.schemas.posting import (
    LedgerEntrySnapshot,
    MonetaryAccount,
    Posting,
)


class LedgerError(Exception):
    """Base class for failures reported by a ledger collaborator."""


class LedgerUnavailableError(LedgerError):
    """
    The ledger could not be reached or asked us to back off.

    Safe to retry for reads. For a submission the outcome is
    unknown and the caller must re-query before retrying.
    """


class LedgerRejectedError(LedgerError, ValueError):
    """The ledger refused the request (validation, unknown account)."""


class LedgerCollaborator(Protocol):

    def list_monetary_accounts(self) -> Sequence[MonetaryAccount]:
        ...

    def query_recent_entries(
        self, date_from: date, date_to: date
    ) -> Sequence[LedgerEntrySnapshot]:
        ...

    def submit_posting(self, posting: Posting) -> str:
        """Create the posting and return the ledger-assigned id."""
        ...
