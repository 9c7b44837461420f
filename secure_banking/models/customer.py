"""
Customer model.

Represents an account holder. A customer can have
multiple accounts. Customers are never deleted.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from secure_banking.models.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_by: Mapped[str] = mapped_column(String(30), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    accounts: Mapped[list["Account"]] = relationship(back_populates="customer")

    def snapshot(self) -> str:
        """Flatten the editable fields for the audit trail."""
        return (
            f"Name: {self.name}, Address: {self.address or ''}, "
            f"Phone: {self.phone or ''}, Email: {self.email or ''}"
        )

    def __repr__(self) -> str:
        return f"<Customer {self.id} {self.name}>"
