"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from secure_banking.models.enums import AccountType, AccountStatus


class AccountOpen(BaseModel):
    """Request to open a new account. Accounts always start at zero."""
    customer_id: int
    account_type: AccountType = AccountType.CHECKING
    currency: str = Field(default="USD", min_length=3, max_length=3)


class AccountResponse(BaseModel):
    id: int
    customer_id: int
    account_type: AccountType
    status: AccountStatus
    balance: Decimal
    currency: str
    created_at: datetime

    model_config = {"from_attributes": True}
