"""
Shared FastAPI dependencies.

The engine configuration is built once per process from
settings. The ledger collaborator is chosen per request by
LEDGER_BACKEND: the local SQL ledger (default) or Fiken.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from ledger_engine.clients.fiken_client import FikenClient
from ledger_engine.config import get_settings
from ledger_engine.engine_config import EngineConfig
from ledger_engine.models.base import get_db
from ledger_engine.services.ledger_service import LedgerService
from ledger_engine.services.reconciliation_service import ReconciliationService


@lru_cache()
def get_engine_config() -> EngineConfig:
    return EngineConfig.from_settings(get_settings())


def get_ledger(
    db: Session = Depends(get_db),
    config: EngineConfig = Depends(get_engine_config),
):
    """Yield the ledger collaborator for this request."""
    settings = get_settings()
    if settings.LEDGER_BACKEND == "fiken":
        client = FikenClient.from_settings(settings, config)
        try:
            yield client
        finally:
            client.close()
    else:
        yield LedgerService(db, config)


def get_reconciliation_service(
    ledger=Depends(get_ledger),
    config: EngineConfig = Depends(get_engine_config),
) -> ReconciliationService:
    return ReconciliationService(ledger, config)
