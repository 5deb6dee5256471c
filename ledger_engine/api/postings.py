"""
Posting API endpoints.

Results are returned as typed bodies with a `kind` field; the
HTTP status tells the caller which follow-up is needed.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ledger_engine.api.deps import get_engine_config, get_reconciliation_service
from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.base import get_db
from ledger_engine.models.enums import RejectionReason
from ledger_engine.schemas.posting import Posting
from ledger_engine.schemas.reconciliation import ReconcileRequest
from ledger_engine.schemas.results import (
    Accepted,
    CollaboratorUnavailable,
    NeedsDisambiguation,
    ReconcileResult,
    Rejected,
)
from ledger_engine.services.posting_balancer import PostingBalancer
from ledger_engine.services.reconciliation_service import ReconciliationService

router = APIRouter(prefix="/postings", tags=["Postings"])

_REJECTION_STATUS = {
    RejectionReason.INVALID_POSTING: 400,
    RejectionReason.LEDGER_REJECTED: 400,
    RejectionReason.LIKELY_DUPLICATE: 409,
    RejectionReason.NO_ACCOUNT_AVAILABLE: 422,
}


def _status_for(result: ReconcileResult) -> int:
    if isinstance(result, Accepted):
        return 201
    if isinstance(result, Rejected):
        return _REJECTION_STATUS[result.reason]
    if isinstance(result, NeedsDisambiguation):
        return 409
    if isinstance(result, CollaboratorUnavailable):
        return 503
    raise TypeError(f"unexpected result type: {type(result).__name__}")


@router.post("/validate")
def validate_posting(
    posting: Posting,
    config: EngineConfig = Depends(get_engine_config),
):
    """
    Check a posting without contacting the ledger.

    Always 200; the body's `kind` says whether it is balanced.
    """
    result = PostingBalancer(config).validate(posting)
    return result.model_dump(mode="json")


@router.post("")
def submit_posting(
    request: ReconcileRequest,
    db: Session = Depends(get_db),
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """
    Validate, resolve the bank account, check for duplicates, and submit.

    - 201: accepted
    - 400: invalid posting, or refused by the ledger
    - 409: likely duplicate, or a bank account must be chosen
    - 422: no bank account to settle against
    - 503: ledger unreachable (see outcome_unknown before retrying)
    """
    result = service.reconcile(
        request.posting,
        known_accounts=request.known_accounts,
        recent_entries=request.recent_entries,
        explicit_account=request.explicit_account,
    )
    if isinstance(result, Accepted):
        db.commit()
    else:
        db.rollback()

    return JSONResponse(
        status_code=_status_for(result),
        content=result.model_dump(mode="json"),
    )
