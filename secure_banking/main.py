"""
Secure Banking: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from secure_banking.config import get_settings
from secure_banking.logging_config import configure_logging
from secure_banking.api.health import router as health_router
from secure_banking.api.customers import router as customers_router
from secure_banking.api.accounts import router as accounts_router
from secure_banking.api.transactions import router as transactions_router
from secure_banking.api.audit import router as audit_router

settings = get_settings()

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Role-scoped banking operations with an elevated audit trail",
)

# Register routers
app.include_router(health_router)
app.include_router(customers_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(audit_router)
