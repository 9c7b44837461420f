"""
Transaction service: deposits, withdrawals and their approval.

Each creation:
1. Checks the caller may create transactions at all
2. Validates the amount
3. Locks the account
4. Either applies the balance movement at once (amount at or
   below the approval threshold) or parks the transaction in
   PENDING_APPROVAL without touching the balance
5. Inserts the transaction record and its audit entry

Approval is reserved for managers. It re-checks the balance at
approval time, because the balance may have moved since the
transaction was created.

If anything fails, the whole unit of work is rolled back: no
transaction row, no balance change and no audit entry survive.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from secure_banking.config import get_settings
from secure_banking.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    NotFoundOrInvalidStateError,
    ValidationError,
)
from secure_banking.models.account import Account
from secure_banking.models.base import unit_of_work
from secure_banking.models.customer import Customer
from secure_banking.models.enums import (
    AuditAction,
    Privilege,
    Role,
    TransactionStatus,
)
from secure_banking.models.transaction import Transaction
from secure_banking.schemas.transaction import TransactionCreate, TransactionDetails
from secure_banking.security.gate import AuthorizationGate
from secure_banking.security.grants import Operation
from secure_banking.security.identity import Principal
from secure_banking.security.registry import RoleRegistry
from secure_banking.security.store import GuardedStore
from secure_banking.services.audit_service import AuditService
from secure_banking.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

AUDIT_ENTITY = "TRANSACTIONS"


class TransactionService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()
        self.gate = AuthorizationGate(RoleRegistry(db))
        self.audit_service = AuditService(db, self.gate)
        self.ledger_service = LedgerService(db, self.gate, self.audit_service)

    def requires_approval(self, amount) -> bool:
        return amount > self.settings.APPROVAL_THRESHOLD

    def create_transaction(
        self, principal: Principal, request: TransactionCreate
    ) -> Transaction:
        """
        Create a deposit or withdrawal.

        Amounts above the approval threshold are created
        PENDING_APPROVAL and leave the balance alone. Smaller
        amounts are APPROVED and posted immediately; a withdrawal
        the balance cannot cover raises InsufficientFundsError and
        nothing is created.
        """
        identity = self.gate.require(principal, Operation.CREATE_TRANSACTION)
        if request.amount <= 0:
            raise ValidationError(
                f"Transaction amount must be positive, got {request.amount}"
            )

        store = GuardedStore(self.db, identity)
        store.check(Transaction, Privilege.INSERT)

        try:
            with unit_of_work(self.db):
                account = self.ledger_service.lock_account(
                    store, request.account_id
                )

                if self.requires_approval(request.amount):
                    status = TransactionStatus.PENDING_APPROVAL
                else:
                    status = TransactionStatus.APPROVED
                    self.ledger_service.apply(
                        store, account, request.transaction_type, request.amount
                    )

                txn = store.add(Transaction(
                    account_id=account.id,
                    amount=request.amount,
                    transaction_type=request.transaction_type,
                    status=status,
                    description=request.description,
                    created_by=identity.name,
                ))
                self.audit_service.record(
                    principal, AuditAction.CREATE, AUDIT_ENTITY, txn.id,
                    new_value=(
                        f"New {request.transaction_type.value} "
                        f"transaction: ${request.amount}"
                    ),
                )
        except InsufficientFundsError as e:
            logger.warning(
                "Transaction rejected: insufficient funds",
                extra={"principal": principal.name, "account_id": e.account_id},
            )
            raise

        logger.info(
            "Transaction created",
            extra={
                "principal": principal.name,
                "transaction_id": txn.id,
                "status": status.value,
            },
        )
        return txn

    def approve_transaction(
        self, principal: Principal, transaction_id: int
    ) -> Transaction:
        """
        Approve a PENDING_APPROVAL transaction and post it.

        Only managers may approve. The UPDATE grant on transactions
        alone is not enough, since it cannot tell approving a
        transaction apart from editing it.
        """
        identity = self.gate.require(principal, Operation.APPROVE_TRANSACTION)
        self.gate.require_role(principal, Role.MANAGER)
        store = GuardedStore(self.db, identity)

        try:
            with unit_of_work(self.db):
                txn = store.get(
                    Transaction, transaction_id, lock_for=Privilege.UPDATE
                )
                if txn is None or txn.status != TransactionStatus.PENDING_APPROVAL:
                    raise NotFoundOrInvalidStateError(
                        f"Transaction {transaction_id} not found "
                        f"or not pending approval"
                    )

                account = self.ledger_service.lock_account(store, txn.account_id)
                self.ledger_service.apply(
                    store, account, txn.transaction_type, txn.amount
                )

                store.update(
                    txn,
                    status=TransactionStatus.APPROVED,
                    approved_by=identity.name,
                    approved_at=datetime.utcnow(),
                )
                self.audit_service.record(
                    principal, AuditAction.APPROVE, AUDIT_ENTITY, transaction_id,
                    old_value=TransactionStatus.PENDING_APPROVAL.value,
                    new_value=TransactionStatus.APPROVED.value,
                )
        except InsufficientFundsError as e:
            logger.warning(
                "Approval rejected: insufficient funds",
                extra={
                    "principal": principal.name,
                    "transaction_id": transaction_id,
                    "account_id": e.account_id,
                },
            )
            raise

        logger.info(
            "Transaction approved",
            extra={"principal": principal.name, "transaction_id": transaction_id},
        )
        return txn

    def get_transaction_details(
        self, principal: Principal, transaction_id: int
    ) -> TransactionDetails:
        """Read a transaction together with its account and customer."""
        identity = self.gate.require(principal, Operation.GET_TRANSACTION_DETAILS)
        store = GuardedStore(self.db, identity)

        stmt = (
            select(Transaction, Customer)
            .join(Account, Transaction.account_id == Account.id)
            .join(Customer, Account.customer_id == Customer.id)
            .where(Transaction.id == transaction_id)
        )

        with unit_of_work(self.db):
            row = store.execute(stmt, Transaction, Account, Customer).one_or_none()
            if row is None:
                raise NotFoundError(f"Transaction {transaction_id} not found")

            txn, customer = row
            details = TransactionDetails(
                transaction_id=txn.id,
                account_id=txn.account_id,
                customer_id=customer.id,
                customer_name=customer.name,
                amount=txn.amount,
                transaction_type=txn.transaction_type,
                status=txn.status,
                description=txn.description,
                created_by=txn.created_by,
                created_at=txn.created_at,
                approved_by=txn.approved_by,
                approved_at=txn.approved_at,
            )
            self.audit_service.record(
                principal, AuditAction.VIEW, AUDIT_ENTITY, transaction_id,
            )
        return details
