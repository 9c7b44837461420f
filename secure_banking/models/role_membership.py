"""
Role membership model.

Maps a principal to the roles it holds. Rows are maintained by
an administrative process; the banking operations only read
them.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from secure_banking.models.base import Base


class RoleMembership(Base):
    __tablename__ = "role_memberships"
    __table_args__ = (
        UniqueConstraint("principal", "role", name="uq_role_membership"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    principal: Mapped[str] = mapped_column(
        String(30), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(30), nullable=False)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<RoleMembership {self.principal} {self.role}>"
