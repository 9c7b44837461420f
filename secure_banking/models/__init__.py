"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from secure_banking.models.base import Base
from secure_banking.models.enums import (
    Role,
    Privilege,
    AccountType,
    AccountStatus,
    TransactionType,
    TransactionStatus,
    AuditAction,
)
from secure_banking.models.audit_log import AuditLog
from secure_banking.models.role_membership import RoleMembership
from secure_banking.models.customer import Customer
from secure_banking.models.account import Account
from secure_banking.models.transaction import Transaction

__all__ = [
    "Base",
    "Role",
    "Privilege",
    "AccountType",
    "AccountStatus",
    "TransactionType",
    "TransactionStatus",
    "AuditAction",
    "AuditLog",
    "RoleMembership",
    "Customer",
    "Account",
    "Transaction",
]
