"""
Ledger Engine: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ledger_engine.config import get_settings
from ledger_engine.logging_config import configure_logging
from ledger_engine.models.base import init_db
from ledger_engine.api.health import router as health_router
from ledger_engine.api.ledger import router as ledger_router
from ledger_engine.api.postings import router as postings_router
from ledger_engine.api.reconciliation import router as reconciliation_router
from ledger_engine.api.vat import router as vat_router

settings = get_settings()
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.LEDGER_BACKEND == "local":
        init_db()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Validates, de-duplicates and submits double-entry postings",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(postings_router)
app.include_router(reconciliation_router)
app.include_router(vat_router)
