"""Business logic services."""

from secure_banking.services.audit_service import AuditService, AuditTrail
from secure_banking.services.customer_service import CustomerService
from secure_banking.services.ledger_service import LedgerService
from secure_banking.services.transaction_service import TransactionService

__all__ = [
    "AuditService",
    "AuditTrail",
    "CustomerService",
    "LedgerService",
    "TransactionService",
]
