"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Secure Banking"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/secure_banking"
    )
    # How long a statement may wait on a row lock before the
    # store gives up and the unit of work is rolled back.
    LOCK_TIMEOUT_MS: int = int(os.getenv("LOCK_TIMEOUT_MS", "5000"))

    # Business rules
    # Transactions strictly above this amount wait for a manager.
    APPROVAL_THRESHOLD: Decimal = Decimal(
        os.getenv("APPROVAL_THRESHOLD", "10000")
    )

    # Identity the audit trail is written and read under
    AUDIT_SERVICE_IDENTITY: str = os.getenv(
        "AUDIT_SERVICE_IDENTITY", "AUDIT_SERVICE"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls.
    """
    return Settings()
