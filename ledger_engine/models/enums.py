"""
Shared enumerations.

Using Python enums mapped to database enums ensures that
only valid values can be stored. The same enums are used by
the pydantic schemas, so an invalid direction is rejected
at the API boundary and at the database level.
"""

import enum


class EntryType(str, enum.Enum):
    """Direction of a posting line."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class AccountClass(str, enum.Enum):
    """How an account code may be used in a posting line."""
    PLAIN = "PLAIN"
    MONETARY_CONTROL = "MONETARY_CONTROL"
    MALFORMED = "MALFORMED"


class MalformedReason(str, enum.Enum):
    """Why an account code was classified as malformed."""
    # A bank/cash root like "1920" used without its instrument suffix
    MISSING_SUBLEDGER = "missing_subledger"
    # Not an account code at all
    INVALID_CODE = "invalid_code"


class VatDirection(str, enum.Enum):
    """Whether a VAT class applies to purchases, sales or both."""
    PURCHASE = "PURCHASE"
    SALE = "SALE"


class RejectionReason(str, enum.Enum):
    """Why a proposed posting was not submitted."""
    INVALID_POSTING = "invalid_posting"
    NO_ACCOUNT_AVAILABLE = "no_account_available"
    LIKELY_DUPLICATE = "likely_duplicate"
    LEDGER_REJECTED = "ledger_rejected"


class CollaboratorStage(str, enum.Enum):
    """Which call to the ledger failed."""
    LIST_ACCOUNTS = "list_accounts"
    QUERY_ENTRIES = "query_entries"
    SUBMIT = "submit"
