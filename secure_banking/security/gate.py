"""
Authorization gate.

Every public operation passes through the gate before touching
the store. The gate answers two questions:

1. May this principal invoke the operation at all? (EXECUTE)
2. Whose privileges does the operation's storage access run
   under? Run-as-caller operations get the caller's own grants;
   run-as-service operations get the fixed service identity,
   whatever the caller's own grants are.

The gate never looks at table privileges itself. Those are
checked by the GuardedStore against the identity returned here,
at the point each read or write happens.
"""

import logging
from dataclasses import dataclass

from secure_banking.config import get_settings
from secure_banking.exceptions import UnauthorizedError
from secure_banking.models.enums import Role
from secure_banking.security.grants import (
    AUDIT_SERVICE_GRANTS,
    OPERATION_POLICIES,
    ExecutionMode,
    Operation,
)
from secure_banking.security.identity import (
    CallerIdentity,
    EffectiveIdentity,
    Principal,
    ServiceIdentity,
)
from secure_banking.security.registry import RoleRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allowed:
    identity: EffectiveIdentity


@dataclass(frozen=True)
class Denied:
    reason: str


Decision = Allowed | Denied


class RunAsCaller:
    """Storage access is checked against the caller's role grants."""

    def effective_identity(
        self, principal: Principal, roles: frozenset[Role]
    ) -> EffectiveIdentity:
        return CallerIdentity(principal=principal, roles=roles)


class RunAsService:
    """Storage access runs under a fixed service identity."""

    def __init__(self, service_name: str, grants: dict):
        self.service_name = service_name
        self.grants = grants

    def effective_identity(
        self, principal: Principal, roles: frozenset[Role]
    ) -> EffectiveIdentity:
        return ServiceIdentity(
            name=self.service_name,
            acting_for=principal,
            grants=self.grants,
        )


class AuthorizationGate:

    def __init__(self, registry: RoleRegistry, strategies: dict | None = None):
        self.registry = registry
        if strategies is None:
            strategies = {
                ExecutionMode.CALLER: RunAsCaller(),
                ExecutionMode.SERVICE: RunAsService(
                    get_settings().AUDIT_SERVICE_IDENTITY, AUDIT_SERVICE_GRANTS
                ),
            }
        self.strategies = strategies

    def authorize(self, principal: Principal, operation: Operation) -> Decision:
        """Decide whether the principal may run the operation, and as whom."""
        policy = OPERATION_POLICIES[operation]
        roles = self.registry.roles_of(principal)

        if not roles & policy.execute_roles:
            return Denied(
                f"Principal '{principal.name}' may not execute "
                f"{operation.value}"
            )

        strategy = self.strategies[policy.mode]
        return Allowed(strategy.effective_identity(principal, roles))

    def require(
        self, principal: Principal, operation: Operation
    ) -> EffectiveIdentity:
        """Like authorize(), but raise UnauthorizedError on denial."""
        decision = self.authorize(principal, operation)
        if isinstance(decision, Denied):
            logger.warning(
                "Operation denied",
                extra={
                    "principal": principal.name,
                    "operation": operation.value,
                },
            )
            raise UnauthorizedError(decision.reason)
        return decision.identity

    def require_role(self, principal: Principal, role: Role | str) -> None:
        """Explicit role check for rules finer than table grants."""
        if not self.registry.has_role(principal, role):
            role_name = role.value if isinstance(role, Role) else role
            logger.warning(
                "Role check failed",
                extra={"principal": principal.name, "role": role_name},
            )
            raise UnauthorizedError(
                f"Principal '{principal.name}' does not hold role {role_name}"
            )
