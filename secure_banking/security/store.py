"""
Guarded store: the storage access layer.

Services never use the Session directly for business data. They
go through a GuardedStore bound to the effective identity the
AuthorizationGate produced, and every read, insert, update or
balance posting is checked against that identity's privileges
on the table involved before any SQL is sent.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from secure_banking.exceptions import UnauthorizedError
from secure_banking.models.enums import Privilege
from secure_banking.security.identity import EffectiveIdentity

logger = logging.getLogger(__name__)


def _entity(model) -> str:
    return model.__tablename__


class GuardedStore:

    def __init__(self, db: Session, identity: EffectiveIdentity):
        self.db = db
        self.identity = identity

    def check(self, model, privilege: Privilege) -> None:
        """Raise UnauthorizedError unless the identity holds the privilege."""
        entity = _entity(model)
        if not self.identity.can(entity, privilege):
            logger.warning(
                "Storage privilege denied",
                extra={
                    "identity": self.identity.name,
                    "entity": entity,
                    "privilege": privilege.value,
                },
            )
            raise UnauthorizedError(
                f"'{self.identity.name}' lacks {privilege.value} "
                f"privilege on {entity}"
            )

    def get(self, model, ident: int, *, lock_for: Privilege | None = None):
        """
        Load one row by primary key.

        With lock_for the row is read SELECT ... FOR UPDATE, which
        requires the privilege of the write the lock is taken for
        as well as SELECT. The fresh row always overwrites any copy
        already in the session.
        """
        self.check(model, Privilege.SELECT)
        stmt = select(model).where(model.id == ident)
        if lock_for is not None:
            self.check(model, lock_for)
            stmt = stmt.with_for_update()
        return self.db.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def execute(self, stmt, *models):
        """Run a read statement touching the given models."""
        for model in models:
            self.check(model, Privilege.SELECT)
        return self.db.execute(stmt)

    def add(self, obj):
        """Insert a new row and flush so it gets its id."""
        self.check(type(obj), Privilege.INSERT)
        self.db.add(obj)
        self.db.flush()
        return obj

    def update(self, obj, **values):
        """Change columns on an already loaded row."""
        self.check(type(obj), Privilege.UPDATE)
        for key, value in values.items():
            setattr(obj, key, value)
        self.db.flush()
        return obj

    def post(self, model, ident: int, values: dict, *conditions) -> int:
        """
        Conditionally update one row in a single statement.

        Used for balance movements: the conditions are evaluated
        by the store at write time, so a stale read can never
        push a balance below what the conditions allow. Returns
        the number of rows changed (0 or 1). Loaded copies of the
        row are not synchronized; refresh() them afterwards.
        """
        self.check(model, Privilege.POST)
        result = self.db.execute(
            update(model)
            .where(model.id == ident, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, obj):
        self.check(type(obj), Privilege.SELECT)
        self.db.refresh(obj)
        return obj
