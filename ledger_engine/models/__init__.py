"""
Database models package.

All models must be imported here so that Base.metadata knows
about every table when init_db() or the test fixtures create
the schema.
"""

from ledger_engine.models.base import Base
from ledger_engine.models.enums import (
    AccountClass,
    CollaboratorStage,
    EntryType,
    MalformedReason,
    RejectionReason,
    VatDirection,
)
from ledger_engine.models.ledger_account import LedgerAccount
from ledger_engine.models.ledger_entry import JournalEntry, LedgerEntry

__all__ = [
    "Base",
    "AccountClass",
    "CollaboratorStage",
    "EntryType",
    "MalformedReason",
    "RejectionReason",
    "VatDirection",
    "LedgerAccount",
    "JournalEntry",
    "LedgerEntry",
]
