"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode access tokens or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Ledger Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    # Database (local ledger backend)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./ledger_engine.db"
    )

    # Which ledger the engine talks to: "local" or "fiken"
    LEDGER_BACKEND: str = os.getenv("LEDGER_BACKEND", "local")

    # Remote ledger
    FIKEN_API_BASE: str = os.getenv(
        "FIKEN_API_BASE",
        "https://api.fiken.no/api/v2"
    )
    FIKEN_ACCESS_TOKEN: str = os.getenv("FIKEN_ACCESS_TOKEN", "")
    FIKEN_COMPANY_SLUG: str = os.getenv("FIKEN_COMPANY_SLUG", "")
    FIKEN_TIMEOUT_SECONDS: float = float(
        os.getenv("FIKEN_TIMEOUT_SECONDS", "30")
    )

    # Reconciliation
    # Amounts are in minor units (øre). 500 = 5 kr.
    AMOUNT_TOLERANCE_MINOR: int = int(
        os.getenv("AMOUNT_TOLERANCE_MINOR", "500")
    )
    DATE_TOLERANCE_DAYS: int = int(os.getenv("DATE_TOLERANCE_DAYS", "5"))
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "NOK")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
