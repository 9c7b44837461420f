"""
Account API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from secure_banking.api.dependencies import get_principal
from secure_banking.api.errors import http_error
from secure_banking.exceptions import BankingError
from secure_banking.models.base import get_db
from secure_banking.schemas.account import AccountOpen, AccountResponse
from secure_banking.security.identity import Principal
from secure_banking.services.ledger_service import LedgerService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def open_account(
    request: AccountOpen,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Open a zero-balance account. Managers only."""
    service = LedgerService(db)
    try:
        return service.open_account(principal, request)
    except BankingError as e:
        raise http_error(e)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Get account details including the balance."""
    service = LedgerService(db)
    try:
        return service.get_account(principal, account_id)
    except BankingError as e:
        raise http_error(e)
