"""
Role registry: which principal holds which roles.

Every lookup goes to the database. Nothing is cached, so a role
revoked by an administrator takes effect on the very next call.
"""

import logging

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from secure_banking.models.enums import Role
from secure_banking.models.role_membership import RoleMembership
from secure_banking.security.identity import Principal

logger = logging.getLogger(__name__)


def _role_name(role: Role | str) -> str:
    if isinstance(role, Role):
        return role.value
    return role.upper()


class RoleRegistry:

    def __init__(self, db: Session):
        self.db = db

    def has_role(self, principal: Principal, role_name: Role | str) -> bool:
        """True if the principal holds the role. Role names ignore case."""
        count = self.db.execute(
            select(func.count(RoleMembership.id)).where(
                RoleMembership.principal == principal.name,
                func.upper(RoleMembership.role) == _role_name(role_name),
            )
        ).scalar()
        return count > 0

    def roles_of(self, principal: Principal) -> frozenset[Role]:
        """All known roles held by the principal."""
        names = self.db.execute(
            select(RoleMembership.role).where(
                RoleMembership.principal == principal.name
            )
        ).scalars().all()
        known = {r.value for r in Role}
        return frozenset(Role(n.upper()) for n in names if n.upper() in known)

    # --- Administration ---
    # Used by provisioning scripts and tests; not part of the
    # operation surface and not gated.

    def assign_role(self, principal_name: str, role: Role | str) -> None:
        name = _role_name(role)
        existing = self.db.execute(
            select(RoleMembership).where(
                RoleMembership.principal == principal_name,
                func.upper(RoleMembership.role) == name,
            )
        ).scalar_one_or_none()
        if existing:
            return
        self.db.add(RoleMembership(principal=principal_name, role=name))
        self.db.flush()
        logger.info("Role assigned", extra={"principal": principal_name, "role": name})

    def revoke_role(self, principal_name: str, role: Role | str) -> None:
        name = _role_name(role)
        self.db.execute(
            delete(RoleMembership).where(
                RoleMembership.principal == principal_name,
                func.upper(RoleMembership.role) == name,
            )
        )
        self.db.flush()
        logger.info("Role revoked", extra={"principal": principal_name, "role": name})
