"""
Pydantic schemas for the audit trail.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AuditEventCreate(BaseModel):
    """
    An audit event reported by a caller.

    The entity name and the old/new values are taken as given;
    they are not checked against the tables they describe.
    """
    action_type: str = Field(min_length=1, max_length=50)
    affected_entity: str = Field(min_length=1, max_length=30)
    affected_id: int | None = None
    old_value: str | None = None
    new_value: str | None = None


class AuditLogResponse(BaseModel):
    id: int
    principal: str
    action_type: str
    affected_entity: str
    affected_id: int | None
    old_value: str | None
    new_value: str | None
    timestamp: datetime
    origin: str | None

    model_config = {"from_attributes": True}
