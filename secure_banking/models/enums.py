"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class Role(str, enum.Enum):
    """Job roles a principal can be granted."""
    TELLER = "TELLER"
    MANAGER = "MANAGER"
    AUDITOR = "AUDITOR"


class Privilege(str, enum.Enum):
    """
    Table-level privileges checked by the guarded store.

    POST is the right to have the ledger apply a balance
    movement to an account; it never allows editing the
    balance column directly.
    """
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    POST = "POST"


class AccountType(str, enum.Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    FROZEN = "FROZEN"
    CLOSED = "CLOSED"


class TransactionType(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class TransactionStatus(str, enum.Enum):
    """Only PENDING_APPROVAL -> APPROVED is ever allowed."""
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"


class AuditAction(str, enum.Enum):
    """Action types written by the banking operations themselves."""
    CREATE = "CREATE"
    VIEW = "VIEW"
    UPDATE = "UPDATE"
    APPROVE = "APPROVE"
