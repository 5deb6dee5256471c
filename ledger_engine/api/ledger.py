"""
Ledger API endpoints.

The chart-of-accounts endpoints manage the local ledger. The
monetary-accounts endpoint lists bank accounts from whichever
ledger backend is configured.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ledger_engine.api.deps import get_engine_config, get_ledger
from ledger_engine.clients.base import LedgerError
from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.base import get_db
from ledger_engine.schemas.ledger import (
    AccountBalanceResponse,
    LedgerAccountCreate,
    LedgerAccountResponse,
)
from ledger_engine.schemas.posting import MonetaryAccount
from ledger_engine.services.ledger_service import LedgerService

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.post("/accounts", response_model=LedgerAccountResponse, status_code=201)
def create_ledger_account(
    request: LedgerAccountCreate,
    db: Session = Depends(get_db),
    config: EngineConfig = Depends(get_engine_config),
):
    """
    Create a new account in the local chart of accounts.

    Bank accounts must be created with their sub-ledger suffix
    ("1920:10001"); a bare "1920" is refused.
    """
    service = LedgerService(db, config)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/accounts", response_model=list[LedgerAccountResponse])
def list_ledger_accounts(
    db: Session = Depends(get_db),
    config: EngineConfig = Depends(get_engine_config),
):
    """List the local chart of accounts, ordered by code."""
    return LedgerService(db, config).list_accounts()


@router.get("/accounts/{code}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    code: str,
    db: Session = Depends(get_db),
    config: EngineConfig = Depends(get_engine_config),
):
    """Balance (debits - credits) of a local account, in minor units."""
    service = LedgerService(db, config)
    try:
        balance = service.get_account_balance(code)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return AccountBalanceResponse(
        account_code=code,
        balance=balance,
        currency=config.currency,
    )


@router.get("/monetary-accounts", response_model=list[MonetaryAccount])
def list_monetary_accounts(ledger=Depends(get_ledger)):
    """Bank and cash accounts known to the configured ledger."""
    try:
        return ledger.list_monetary_accounts()
    except LedgerError as e:
        raise HTTPException(status_code=503, detail=str(e))
