"""
Who may do what.

Three tables drive every authorization decision:

* TABLE_GRANTS: per role, the privileges it holds on each table.
  These are the privileges a run-as-caller operation is checked
  against by the GuardedStore.
* AUDIT_SERVICE_GRANTS: the fixed privileges of the audit
  service identity, used by run-as-service operations.
* OPERATION_POLICIES: per public operation, which roles may
  invoke it at all (EXECUTE) and whose privileges its storage
  access runs under.

Permission matrix (tables):

    Table          TELLER          MANAGER                      AUDITOR
    customers      SELECT INSERT   SELECT INSERT UPDATE         SELECT
    accounts       SELECT POST     SELECT INSERT UPDATE POST    SELECT
    transactions   SELECT INSERT   SELECT INSERT UPDATE         SELECT
    audit_logs     -               -                            SELECT
"""

import enum
from dataclasses import dataclass

from secure_banking.models.enums import Role, Privilege

_SELECT = Privilege.SELECT
_INSERT = Privilege.INSERT
_UPDATE = Privilege.UPDATE
_POST = Privilege.POST


TABLE_GRANTS: dict[Role, dict[str, frozenset[Privilege]]] = {
    Role.TELLER: {
        "customers": frozenset({_SELECT, _INSERT}),
        "accounts": frozenset({_SELECT, _POST}),
        "transactions": frozenset({_SELECT, _INSERT}),
    },
    Role.MANAGER: {
        "customers": frozenset({_SELECT, _INSERT, _UPDATE}),
        "accounts": frozenset({_SELECT, _INSERT, _UPDATE, _POST}),
        "transactions": frozenset({_SELECT, _INSERT, _UPDATE}),
    },
    Role.AUDITOR: {
        "customers": frozenset({_SELECT}),
        "accounts": frozenset({_SELECT}),
        "transactions": frozenset({_SELECT}),
        "audit_logs": frozenset({_SELECT}),
    },
}

AUDIT_SERVICE_GRANTS: dict[str, frozenset[Privilege]] = {
    "audit_logs": frozenset({_SELECT, _INSERT}),
}


class ExecutionMode(str, enum.Enum):
    """Whose privileges an operation's storage access is checked against."""
    CALLER = "CALLER"
    SERVICE = "SERVICE"


class Operation(str, enum.Enum):
    CREATE_CUSTOMER = "create_customer"
    GET_CUSTOMER_DETAILS = "get_customer_details"
    UPDATE_CUSTOMER = "update_customer"
    OPEN_ACCOUNT = "open_account"
    GET_ACCOUNT = "get_account"
    CREATE_TRANSACTION = "create_transaction"
    APPROVE_TRANSACTION = "approve_transaction"
    GET_TRANSACTION_DETAILS = "get_transaction_details"
    RECORD_AUDIT_EVENT = "record_audit_event"
    QUERY_AUDIT_LOG = "query_audit_log"


@dataclass(frozen=True)
class OperationPolicy:
    execute_roles: frozenset[Role]
    mode: ExecutionMode


_STAFF = frozenset({Role.TELLER, Role.MANAGER})
_EVERYONE = frozenset({Role.TELLER, Role.MANAGER, Role.AUDITOR})

OPERATION_POLICIES: dict[Operation, OperationPolicy] = {
    # update_customer and approve_transaction are executable by tellers;
    # the table grants (and, for approval, an explicit role check)
    # stop them further in.
    Operation.CREATE_CUSTOMER: OperationPolicy(_STAFF, ExecutionMode.CALLER),
    Operation.GET_CUSTOMER_DETAILS: OperationPolicy(_EVERYONE, ExecutionMode.CALLER),
    Operation.UPDATE_CUSTOMER: OperationPolicy(_STAFF, ExecutionMode.CALLER),
    Operation.OPEN_ACCOUNT: OperationPolicy(
        frozenset({Role.MANAGER}), ExecutionMode.CALLER
    ),
    Operation.GET_ACCOUNT: OperationPolicy(_EVERYONE, ExecutionMode.CALLER),
    Operation.CREATE_TRANSACTION: OperationPolicy(_STAFF, ExecutionMode.CALLER),
    Operation.APPROVE_TRANSACTION: OperationPolicy(_STAFF, ExecutionMode.CALLER),
    Operation.GET_TRANSACTION_DETAILS: OperationPolicy(
        _EVERYONE, ExecutionMode.CALLER
    ),
    Operation.RECORD_AUDIT_EVENT: OperationPolicy(_EVERYONE, ExecutionMode.SERVICE),
    Operation.QUERY_AUDIT_LOG: OperationPolicy(
        frozenset({Role.AUDITOR, Role.MANAGER}), ExecutionMode.SERVICE
    ),
}
