"""
Reconciliation API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from ledger_engine.api.deps import get_reconciliation_service
from ledger_engine.clients.base import LedgerError
from ledger_engine.schemas.reconciliation import (
    FindMatchesRequest,
    FindMatchesResponse,
    StatementReconciliation,
    StatementRequest,
)
from ledger_engine.services.reconciliation_service import ReconciliationService

router = APIRouter(prefix="/reconciliation", tags=["Reconciliation"])


@router.post("/matches", response_model=FindMatchesResponse)
def find_matches(
    request: FindMatchesRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """Booked entries near an amount and date, closest first."""
    try:
        matches = service.find_existing(
            request.amount,
            request.entry_date,
            amount_tolerance=request.amount_tolerance,
            date_tolerance_days=request.date_tolerance_days,
        )
    except LedgerError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return FindMatchesResponse(match_count=len(matches), matches=matches)


@router.post("/statement", response_model=StatementReconciliation)
def reconcile_statement(
    request: StatementRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """
    Pair bank statement lines with booked entries.

    Unmatched lines are the ones that still need booking.
    """
    if request.period_to < request.period_from:
        raise HTTPException(status_code=400, detail="period_to is before period_from")

    try:
        return service.reconcile_statement(
            request.lines,
            request.period_from,
            request.period_to,
            account_code=request.account_code,
        )
    except LedgerError as e:
        raise HTTPException(status_code=503, detail=str(e))
