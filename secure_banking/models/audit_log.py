"""
Audit log model.

Records who did what to which record, and when. In banking,
auditability is not optional: every important action must be
traceable.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from secure_banking.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a system event.

    Audit logs are append-only. Nothing in the codebase updates
    or deletes an audit record, and only the audit service
    identity has INSERT on this table.

    affected_entity, old_value and new_value are reported by the
    caller and stored as given.
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    principal: Mapped[str] = mapped_column(
        String(30), nullable=False, index=True
    )
    action_type: Mapped[str] = mapped_column(String(50), nullable=False)
    affected_entity: Mapped[str] = mapped_column(String(30), nullable=False)
    affected_id: Mapped[int | None] = mapped_column(nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    origin: Mapped[str | None] = mapped_column(String(45), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<AuditLog {self.action_type} {self.affected_entity}"
            f"#{self.affected_id} by {self.principal}>"
        )
