"""
Database engine, session management, and base model.

The database only backs the local ledger: a self-contained
ledger the engine can post to during development and tests.
Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from ledger_engine.config import get_settings

settings = get_settings()

# SQLite connections may not be shared across threads by default,
# and FastAPI runs sync endpoints in a thread pool.
_connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. A journal entry and its lines must be written
# all-or-nothing.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


def init_db() -> None:
    """Create any missing tables for the local ledger."""
    # Import models so they register on Base.metadata
    import ledger_engine.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
