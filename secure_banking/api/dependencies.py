"""
Request dependencies shared by the routers.

Authentication happens in front of this service; by the time a
request arrives, the authenticated principal name is carried in
the X-Principal header.
"""

from fastapi import Header, HTTPException, Request

from secure_banking.security.identity import Principal


def get_principal(
    request: Request,
    x_principal: str | None = Header(default=None),
) -> Principal:
    """Build the calling principal; the client address becomes its origin."""
    if not x_principal:
        raise HTTPException(
            status_code=401,
            detail={
                "code": "UNAUTHENTICATED",
                "message": "X-Principal header is required",
                "retryable": False,
            },
        )
    origin = request.client.host if request.client else None
    return Principal(name=x_principal, origin=origin)
