"""
Customer API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from secure_banking.api.dependencies import get_principal
from secure_banking.api.errors import http_error
from secure_banking.exceptions import BankingError
from secure_banking.models.base import get_db
from secure_banking.schemas.customer import (
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from secure_banking.security.identity import Principal
from secure_banking.services.customer_service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer(
    request: CustomerCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Create a new customer. Tellers and managers only."""
    service = CustomerService(db)
    try:
        return service.create_customer(principal, request)
    except BankingError as e:
        raise http_error(e)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Get customer details. The read itself is audited."""
    service = CustomerService(db)
    try:
        return service.get_customer_details(principal, customer_id)
    except BankingError as e:
        raise http_error(e)


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    request: CustomerUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """
    Update some of a customer's fields.

    Fields missing from the body are left unchanged.
    Managers only.
    """
    service = CustomerService(db)
    try:
        return service.update_customer(principal, customer_id, request)
    except BankingError as e:
        raise http_error(e)
