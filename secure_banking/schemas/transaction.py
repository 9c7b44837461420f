"""
Pydantic schemas for transaction operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from secure_banking.models.enums import TransactionType, TransactionStatus


class TransactionCreate(BaseModel):
    # Positivity is a business rule checked by the TransactionService
    account_id: int
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    transaction_type: TransactionType
    description: str | None = Field(default=None, max_length=200)


class TransactionResponse(BaseModel):
    id: int
    account_id: int
    amount: Decimal
    transaction_type: TransactionType
    status: TransactionStatus
    description: str | None
    created_by: str
    created_at: datetime
    approved_by: str | None
    approved_at: datetime | None

    model_config = {"from_attributes": True}


class TransactionDetails(BaseModel):
    """A transaction joined with its account and the account holder."""
    transaction_id: int
    account_id: int
    customer_id: int
    customer_name: str
    amount: Decimal
    transaction_type: TransactionType
    status: TransactionStatus
    description: str | None
    created_by: str
    created_at: datetime
    approved_by: str | None
    approved_at: datetime | None
