"""
Ledger service: account balances.

This service enforces the fundamental rules:
1. A balance is only ever changed by posting a movement here
2. A deposit is unconditional addition
3. A withdrawal never takes a balance below zero
4. The account row is locked before its balance is touched

No other service writes a balance. The TransactionService drives
the postings; callers cannot post directly.
"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from secure_banking.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from secure_banking.models.account import Account
from secure_banking.models.base import unit_of_work
from secure_banking.models.customer import Customer
from secure_banking.models.enums import (
    AccountStatus,
    AuditAction,
    Privilege,
    TransactionType,
)
from secure_banking.schemas.account import AccountOpen
from secure_banking.security.gate import AuthorizationGate
from secure_banking.security.grants import Operation
from secure_banking.security.identity import Principal
from secure_banking.security.registry import RoleRegistry
from secure_banking.security.store import GuardedStore
from secure_banking.services.audit_service import AuditService

logger = logging.getLogger(__name__)

AUDIT_ENTITY = "ACCOUNTS"


class LedgerService:
    """
    Account provisioning plus the private balance postings.

    The service takes a database session as a constructor
    argument. Postings run inside the caller's unit of work and
    never commit on their own.
    """

    def __init__(
        self,
        db: Session,
        gate: AuthorizationGate | None = None,
        audit_service: AuditService | None = None,
    ):
        self.db = db
        self.gate = gate or AuthorizationGate(RoleRegistry(db))
        self.audit_service = audit_service or AuditService(db, self.gate)

    def open_account(self, principal: Principal, request: AccountOpen) -> Account:
        """Open a zero-balance account for an existing customer."""
        identity = self.gate.require(principal, Operation.OPEN_ACCOUNT)
        store = GuardedStore(self.db, identity)

        with unit_of_work(self.db):
            customer = store.get(Customer, request.customer_id)
            if customer is None:
                raise NotFoundError(f"Customer {request.customer_id} not found")

            account = store.add(Account(
                customer_id=customer.id,
                account_type=request.account_type,
                currency=request.currency,
                balance=Decimal("0"),
            ))
            self.audit_service.record(
                principal, AuditAction.CREATE, AUDIT_ENTITY, account.id,
                new_value=(
                    f"New {request.account_type.value} account "
                    f"for customer {customer.id}"
                ),
            )

        logger.info(
            "Account opened",
            extra={"principal": principal.name, "account_id": account.id},
        )
        return account

    def get_account(self, principal: Principal, account_id: int) -> Account:
        """Read one account, including its balance."""
        identity = self.gate.require(principal, Operation.GET_ACCOUNT)
        store = GuardedStore(self.db, identity)

        with unit_of_work(self.db):
            account = store.get(Account, account_id)
            if account is None:
                raise NotFoundError(f"Account {account_id} not found")
            self.audit_service.record(
                principal, AuditAction.VIEW, AUDIT_ENTITY, account_id,
            )
        return account

    # --- Postings (called by TransactionService only) ---

    def lock_account(self, store: GuardedStore, account_id: int) -> Account:
        """Load the account SELECT ... FOR UPDATE ahead of a posting."""
        account = store.get(Account, account_id, lock_for=Privilege.POST)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        if account.status != AccountStatus.ACTIVE:
            raise ValidationError(
                f"Account {account_id} is not active "
                f"(status: {account.status.value})"
            )
        return account

    def apply(
        self,
        store: GuardedStore,
        account: Account,
        transaction_type: TransactionType,
        amount: Decimal,
    ) -> Account:
        """
        Move the balance of a locked account.

        The withdrawal check runs twice: against the locked row,
        and again inside the UPDATE itself. The second check is
        what keeps the balance non-negative on stores where
        FOR UPDATE is a no-op.
        """
        if transaction_type == TransactionType.DEPOSIT:
            store.post(
                Account, account.id, {"balance": Account.balance + amount}
            )
        else:
            if account.balance < amount:
                raise InsufficientFundsError(account.id, account.balance, amount)

            changed = store.post(
                Account,
                account.id,
                {"balance": Account.balance - amount},
                Account.balance >= amount,
            )
            if changed == 0:
                store.refresh(account)
                raise InsufficientFundsError(account.id, account.balance, amount)

        return store.refresh(account)
