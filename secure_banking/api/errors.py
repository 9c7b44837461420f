"""
Translate banking errors into HTTP errors.

The response detail keeps the machine-readable code so clients
can tell, for example, a lock timeout (retry) from insufficient
funds (don't).
"""

from fastapi import HTTPException

from secure_banking.exceptions import (
    BankingError,
    ConflictOrTimeoutError,
    InsufficientFundsError,
    NotFoundError,
    NotFoundOrInvalidStateError,
    UnauthorizedError,
    ValidationError,
)

STATUS_CODES: dict[type[BankingError], int] = {
    NotFoundError: 404,
    NotFoundOrInvalidStateError: 409,
    InsufficientFundsError: 400,
    UnauthorizedError: 403,
    ValidationError: 400,
    ConflictOrTimeoutError: 503,
}


def http_error(exc: BankingError) -> HTTPException:
    status_code = STATUS_CODES.get(type(exc), 400)
    return HTTPException(status_code=status_code, detail=exc.to_dict())
