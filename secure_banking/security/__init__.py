"""Authorization: principals, grants, the gate and the guarded store."""

from secure_banking.security.identity import (
    Principal,
    EffectiveIdentity,
    CallerIdentity,
    ServiceIdentity,
)
from secure_banking.security.grants import Operation, ExecutionMode
from secure_banking.security.registry import RoleRegistry
from secure_banking.security.gate import (
    AuthorizationGate,
    Allowed,
    Denied,
    RunAsCaller,
    RunAsService,
)
from secure_banking.security.store import GuardedStore

__all__ = [
    "Principal",
    "EffectiveIdentity",
    "CallerIdentity",
    "ServiceIdentity",
    "Operation",
    "ExecutionMode",
    "RoleRegistry",
    "AuthorizationGate",
    "Allowed",
    "Denied",
    "RunAsCaller",
    "RunAsService",
    "GuardedStore",
]
