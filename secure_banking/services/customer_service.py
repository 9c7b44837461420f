"""
Customer service: create, read and update customer records.

Runs as the caller: a teller can create and read customers but
the update fails on the teller's missing UPDATE privilege;
auditors can only read. Every call, reads included, leaves an
audit entry in the same unit of work.
"""

import logging

from sqlalchemy.orm import Session

from secure_banking.exceptions import NotFoundError, ValidationError
from secure_banking.models.base import unit_of_work
from secure_banking.models.customer import Customer
from secure_banking.models.enums import AuditAction, Privilege
from secure_banking.schemas.customer import CustomerCreate, CustomerUpdate
from secure_banking.security.gate import AuthorizationGate
from secure_banking.security.grants import Operation
from secure_banking.security.identity import Principal
from secure_banking.security.registry import RoleRegistry
from secure_banking.security.store import GuardedStore
from secure_banking.services.audit_service import AuditService

logger = logging.getLogger(__name__)

AUDIT_ENTITY = "CUSTOMERS"


class CustomerService:

    def __init__(self, db: Session):
        self.db = db
        self.gate = AuthorizationGate(RoleRegistry(db))
        self.audit_service = AuditService(db, self.gate)

    def create_customer(
        self, principal: Principal, request: CustomerCreate
    ) -> Customer:
        """Create a new customer, recorded as created by the caller."""
        identity = self.gate.require(principal, Operation.CREATE_CUSTOMER)
        store = GuardedStore(self.db, identity)

        with unit_of_work(self.db):
            customer = store.add(Customer(
                name=request.name,
                address=request.address,
                phone=request.phone,
                email=request.email,
                created_by=identity.name,
            ))
            self.audit_service.record(
                principal, AuditAction.CREATE, AUDIT_ENTITY, customer.id,
                new_value=f"New customer: {request.name}",
            )

        logger.info(
            "Customer created",
            extra={"principal": principal.name, "customer_id": customer.id},
        )
        return customer

    def get_customer_details(
        self, principal: Principal, customer_id: int
    ) -> Customer:
        """
        Read one customer.

        The VIEW audit entry is part of the read: if it cannot be
        written, the read fails too.
        """
        identity = self.gate.require(principal, Operation.GET_CUSTOMER_DETAILS)
        store = GuardedStore(self.db, identity)

        with unit_of_work(self.db):
            customer = store.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError(f"Customer {customer_id} not found")
            self.audit_service.record(
                principal, AuditAction.VIEW, AUDIT_ENTITY, customer_id,
            )
        return customer

    def update_customer(
        self,
        principal: Principal,
        customer_id: int,
        request: CustomerUpdate,
    ) -> Customer:
        """
        Apply a partial update under a row lock.

        The audit entry carries the customer as it was before and
        after the change.
        """
        identity = self.gate.require(principal, Operation.UPDATE_CUSTOMER)
        store = GuardedStore(self.db, identity)
        store.check(Customer, Privilege.UPDATE)

        changes = request.changes()
        if "name" in changes and not changes["name"]:
            raise ValidationError("Customer name cannot be cleared")

        with unit_of_work(self.db):
            customer = store.get(
                Customer, customer_id, lock_for=Privilege.UPDATE
            )
            if customer is None:
                raise NotFoundError(f"Customer {customer_id} not found")

            old_value = customer.snapshot()
            store.update(customer, **changes)
            new_value = customer.snapshot()

            self.audit_service.record(
                principal, AuditAction.UPDATE, AUDIT_ENTITY, customer_id,
                old_value=old_value,
                new_value=new_value,
            )

        logger.info(
            "Customer updated",
            extra={
                "principal": principal.name,
                "customer_id": customer_id,
                "fields": sorted(changes),
            },
        )
        return customer
