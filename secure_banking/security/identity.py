"""
Principals and effective identities.

A Principal is whoever invoked an operation. An effective
identity is whose privileges the storage layer checks while the
operation runs: either the caller itself (with the grants of its
roles) or a fixed service identity acting on the caller's behalf.
"""

from dataclasses import dataclass, field
from typing import Mapping

from secure_banking.models.enums import Role, Privilege
from secure_banking.security.grants import TABLE_GRANTS


@dataclass(frozen=True)
class Principal:
    """An authenticated caller. origin is e.g. the client address."""
    name: str
    origin: str | None = None

    def __str__(self) -> str:
        return self.name


class EffectiveIdentity:
    """Base for identities the GuardedStore can check privileges of."""

    name: str
    acting_for: Principal

    def privileges_on(self, entity: str) -> frozenset[Privilege]:
        raise NotImplementedError

    def can(self, entity: str, privilege: Privilege) -> bool:
        return privilege in self.privileges_on(entity)


@dataclass(frozen=True)
class CallerIdentity(EffectiveIdentity):
    """The caller, holding the union of its roles' table grants."""

    principal: Principal
    roles: frozenset[Role]

    @property
    def name(self) -> str:
        return self.principal.name

    @property
    def acting_for(self) -> Principal:
        return self.principal

    def privileges_on(self, entity: str) -> frozenset[Privilege]:
        privileges: set[Privilege] = set()
        for role in self.roles:
            privileges |= TABLE_GRANTS.get(role, {}).get(entity, frozenset())
        return frozenset(privileges)


@dataclass(frozen=True)
class ServiceIdentity(EffectiveIdentity):
    """A fixed internal identity whose grants do not depend on the caller."""

    name: str
    acting_for: Principal
    grants: Mapping[str, frozenset[Privilege]] = field(default_factory=dict)

    def privileges_on(self, entity: str) -> frozenset[Privilege]:
        return self.grants.get(entity, frozenset())
