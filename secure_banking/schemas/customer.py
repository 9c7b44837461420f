"""
Pydantic schemas for customer operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=100)


class CustomerUpdate(BaseModel):
    """
    Partial update.

    Only fields the caller actually sent are applied; a field
    left out is unchanged. Sending null for address, phone or
    email clears it. The name can be changed but not cleared.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=100)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CustomerResponse(BaseModel):
    id: int
    name: str
    address: str | None
    phone: str | None
    email: str | None
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}
