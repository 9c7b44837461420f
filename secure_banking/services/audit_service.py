"""
Audit service: the only writer and reader of the audit log.

Both operations run as the audit service identity, not as the
caller. Tellers, managers and auditors have no INSERT on the
audit table, yet any of them can record an event through this
service; only auditors and managers can read the trail back.

Callers describe the event themselves (entity name, old and new
values). The service stores what it is given and never rejects
an event because of what it claims to be about.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from secure_banking.models.audit_log import AuditLog
from secure_banking.models.base import unit_of_work
from secure_banking.security.gate import AuthorizationGate
from secure_banking.security.grants import Operation
from secure_banking.security.identity import Principal
from secure_banking.security.registry import RoleRegistry
from secure_banking.security.store import GuardedStore

logger = logging.getLogger(__name__)


def _naive_utc(value: datetime) -> datetime:
    # Timestamps are stored as naive UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _text(value) -> str:
    # Accept enums (AuditAction) as well as free text
    return getattr(value, "value", value)


class AuditTrail:
    """
    A slice of the audit log, newest first.

    Nothing is read until the trail is iterated, and every
    iteration runs the query again, so the same trail can be
    walked more than once.
    """

    def __init__(
        self,
        store: GuardedStore,
        start_time: datetime,
        end_time: datetime,
        principal_filter: str | None = None,
    ):
        self.store = store
        self.start_time = start_time
        self.end_time = end_time
        self.principal_filter = principal_filter

    def statement(self):
        stmt = select(AuditLog).where(
            AuditLog.timestamp >= self.start_time,
            AuditLog.timestamp <= self.end_time,
        )
        if self.principal_filter is not None:
            stmt = stmt.where(AuditLog.principal == self.principal_filter)
        return stmt.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())

    def __iter__(self):
        result = self.store.execute(self.statement(), AuditLog)
        yield from result.scalars()

    def format_lines(self) -> list[str]:
        """Render the trail as a fixed-width report, one line per entry."""
        return [
            f"{entry.timestamp:%Y-%m-%d %H:%M:%S} | "
            f"{entry.principal:<15} | "
            f"{entry.action_type:<15} | "
            f"{entry.affected_entity:<12} | "
            f"ID: {entry.affected_id}"
            for entry in self
        ]


class AuditService:

    def __init__(self, db: Session, gate: AuthorizationGate | None = None):
        self.db = db
        self.gate = gate or AuthorizationGate(RoleRegistry(db))

    def record(
        self,
        principal: Principal,
        action_type,
        affected_entity: str,
        affected_id: int | None,
        old_value: str | None = None,
        new_value: str | None = None,
        origin: str | None = None,
    ) -> AuditLog:
        """
        Append one audit entry.

        When called from inside another operation the entry joins
        that operation's unit of work, so it is committed or
        discarded together with the change it describes.
        """
        identity = self.gate.require(principal, Operation.RECORD_AUDIT_EVENT)
        store = GuardedStore(self.db, identity)

        with unit_of_work(self.db):
            entry = store.add(AuditLog(
                principal=principal.name,
                action_type=_text(action_type),
                affected_entity=affected_entity,
                affected_id=affected_id,
                old_value=old_value,
                new_value=new_value,
                origin=origin if origin is not None else principal.origin,
            ))

        logger.debug(
            "Audit entry recorded",
            extra={
                "principal": principal.name,
                "action_type": entry.action_type,
                "affected_entity": affected_entity,
                "affected_id": affected_id,
            },
        )
        return entry

    def query(
        self,
        principal: Principal,
        start_time: datetime,
        end_time: datetime | None = None,
        principal_filter: str | None = None,
    ) -> AuditTrail:
        """
        Return the entries between start_time and end_time (default now).

        Offset-aware bounds are converted to UTC first.
        """
        identity = self.gate.require(principal, Operation.QUERY_AUDIT_LOG)
        if end_time is None:
            end_time = datetime.utcnow()
        return AuditTrail(
            GuardedStore(self.db, identity),
            _naive_utc(start_time),
            _naive_utc(end_time),
            principal_filter,
        )
