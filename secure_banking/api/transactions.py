"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from secure_banking.api.dependencies import get_principal
from secure_banking.api.errors import http_error
from secure_banking.exceptions import BankingError
from secure_banking.models.base import get_db
from secure_banking.schemas.transaction import (
    TransactionCreate,
    TransactionDetails,
    TransactionResponse,
)
from secure_banking.security.identity import Principal
from secure_banking.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransactionCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Create a deposit or withdrawal.

    Large amounts are created PENDING_APPROVAL and do not move
    the balance until a manager approves them.
    """
    service = TransactionService(db)
    try:
        return service.create_transaction(principal, request)
    except BankingError as e:
        raise http_error(e)


@router.post("/{transaction_id}/approve", response_model=TransactionResponse)
def approve_transaction(
    transaction_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Approve a pending transaction. Managers only."""
    service = TransactionService(db)
    try:
        return service.approve_transaction(principal, transaction_id)
    except BankingError as e:
        raise http_error(e)


@router.get("/{transaction_id}", response_model=TransactionDetails)
def get_transaction(
    transaction_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Get a transaction with its account holder."""
    service = TransactionService(db)
    try:
        return service.get_transaction_details(principal, transaction_id)
    except BankingError as e:
        raise http_error(e)
