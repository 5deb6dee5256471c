"""
Typed outcomes of the engine's operations.

Expected business outcomes (an unbalanced posting, two candidate
bank accounts, a likely duplicate) are returned as values, not
raised. Each result carries a `kind` discriminator and enough
detail for the caller to ask a precise follow-up question.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from ledger_engine.models.enums import (
    CollaboratorStage,
    MalformedReason,
    RejectionReason,
)
from ledger_engine.schemas.posting import MatchCandidate, MonetaryAccount


class _Result(BaseModel):
    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return False


# --- Posting validation ---

class Ok(_Result):
    kind: Literal["ok"] = "ok"

    @property
    def ok(self) -> bool:
        return True


class EmptyPosting(_Result):
    kind: Literal["empty_posting"] = "empty_posting"
    message: str = "posting has no lines"


class InvalidAmount(_Result):
    kind: Literal["invalid_amount"] = "invalid_amount"
    line_index: int
    amount: int
    message: str


class MalformedAccount(_Result):
    kind: Literal["malformed_account"] = "malformed_account"
    line_index: int
    account: str
    reason: MalformedReason
    message: str


class BalanceError(_Result):
    """
    Debits and credits differ for one currency.

    difference is debit_total - credit_total, so a positive value
    means the credit side is short by that amount.
    """
    kind: Literal["balance_error"] = "balance_error"
    currency: str
    debit_total: int
    credit_total: int
    difference: int
    message: str


ValidationFailure = Annotated[
    Union[EmptyPosting, InvalidAmount, MalformedAccount, BalanceError],
    Field(discriminator="kind"),
]
ValidationResult = Union[Ok, EmptyPosting, InvalidAmount, MalformedAccount, BalanceError]


# --- Monetary account resolution ---

class SingleAccount(_Result):
    kind: Literal["single_account"] = "single_account"
    account: MonetaryAccount

    @property
    def ok(self) -> bool:
        return True


class AmbiguousSelection(_Result):
    kind: Literal["ambiguous_selection"] = "ambiguous_selection"
    options: tuple[MonetaryAccount, ...]
    message: str = "more than one active monetary account; choose one"


class NoAccountAvailable(_Result):
    kind: Literal["no_account_available"] = "no_account_available"
    message: str = "no active monetary account found"


ResolveResult = Union[SingleAccount, AmbiguousSelection, NoAccountAvailable]


# --- Reconciliation ---

class Accepted(_Result):
    kind: Literal["accepted"] = "accepted"
    posting_id: str
    account: str | None = None

    @property
    def ok(self) -> bool:
        return True


class Rejected(_Result):
    """
    The posting was not submitted.

    Exactly one of `error`, `duplicate` is set for the
    invalid_posting and likely_duplicate reasons respectively.
    """
    kind: Literal["rejected"] = "rejected"
    reason: RejectionReason
    message: str
    error: Optional[ValidationFailure] = None
    duplicate: MatchCandidate | None = None

    @property
    def duplicate_of(self) -> str | None:
        if self.duplicate is None:
            return None
        return getattr(self.duplicate.candidate, "entry_id", None)


class NeedsDisambiguation(_Result):
    kind: Literal["needs_disambiguation"] = "needs_disambiguation"
    options: tuple[MonetaryAccount, ...]
    message: str = "choose which bank account paid this"


class CollaboratorUnavailable(_Result):
    """
    The ledger could not be reached.

    outcome_unknown is True only when the failure happened while
    submitting: the posting may or may not have landed, so the
    caller must re-query before retrying.
    """
    kind: Literal["collaborator_unavailable"] = "collaborator_unavailable"
    stage: CollaboratorStage
    outcome_unknown: bool
    message: str


ReconcileResult = Union[Accepted, Rejected, NeedsDisambiguation, CollaboratorUnavailable]
