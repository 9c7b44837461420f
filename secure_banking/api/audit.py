"""
Audit trail API endpoints.

Writes and reads both run as the audit service identity; the
caller only needs the right role to reach them.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from secure_banking.api.dependencies import get_principal
from secure_banking.api.errors import http_error
from secure_banking.exceptions import BankingError
from secure_banking.models.base import get_db
from secure_banking.schemas.audit import AuditEventCreate, AuditLogResponse
from secure_banking.security.identity import Principal
from secure_banking.services.audit_service import AuditService

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.post("/events", response_model=AuditLogResponse, status_code=201)
def record_audit_event(
    request: AuditEventCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Append an event to the audit trail. Any staff role."""
    service = AuditService(db)
    try:
        return service.record(
            principal,
            request.action_type,
            request.affected_entity,
            request.affected_id,
            old_value=request.old_value,
            new_value=request.new_value,
        )
    except BankingError as e:
        raise http_error(e)


@router.get("/events", response_model=list[AuditLogResponse])
def query_audit_log(
    start_time: datetime,
    end_time: datetime | None = None,
    principal_filter: str | None = Query(default=None, alias="principal"),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """List audit entries in a time window, newest first. Auditors and managers."""
    service = AuditService(db)
    try:
        trail = service.query(principal, start_time, end_time, principal_filter)
        return list(trail)
    except BankingError as e:
        raise http_error(e)
