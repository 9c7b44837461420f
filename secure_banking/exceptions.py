"""
Typed errors raised by the banking operations.

Every error carries a machine-readable code so callers (and the
HTTP layer) can branch on the kind of failure instead of parsing
messages. Any of these aborts the whole unit of work.
"""


class BankingError(Exception):
    """Base for all business-rule and authorization failures."""

    code: str = "BANKING_ERROR"
    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


class NotFoundError(BankingError):
    """A customer, account or transaction id does not exist."""

    code = "NOT_FOUND"


class NotFoundOrInvalidStateError(BankingError):
    """
    The transaction does not exist or is not in the required state.

    The two causes are deliberately reported as one kind; callers
    cannot tell a missing id from an already-approved one.
    """

    code = "NOT_FOUND_OR_INVALID_STATE"


class InsufficientFundsError(BankingError):
    """A withdrawal exceeds the balance at the moment it is applied."""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, account_id: int, available, requested) -> None:
        self.account_id = account_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient funds in account {account_id}: "
            f"available={available}, requested={requested}"
        )


class UnauthorizedError(BankingError):
    """The principal lacks the role or privilege for the action."""

    code = "UNAUTHORIZED"


class ValidationError(BankingError):
    """Request values break a business rule (e.g. non-positive amount)."""

    code = "VALIDATION_ERROR"


class ConflictOrTimeoutError(BankingError):
    """The store reported lock contention or a lock-wait timeout."""

    code = "CONFLICT_OR_TIMEOUT"
    retryable = True
