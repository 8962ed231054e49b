"""Interface layer errors.

Maps domain errors raised by use cases to HTTP responses.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ink.domain.error import (
    AlreadyDoneError,
    ConflictError,
    DomainError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    PollClosedError,
    StoreUnavailableError,
    ValidationError,
)

# Most specific first: lookups walk this list with isinstance
_STATUS_CODES: list[tuple[type[DomainError], int]] = [
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyDoneError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PollClosedError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(error: DomainError) -> int:
    """HTTP status code for a domain error (500 if unmapped)."""
    for error_type, code in _STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error as a JSON error response."""
    code = status_code_for(exc)
    if code >= 500:
        logfire.error(
            "Request failed", path=request.url.path, error=str(exc), kind=type(exc).__name__
        )
    else:
        logfire.info(
            "Request rejected", path=request.url.path, status=code, kind=type(exc).__name__
        )
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "kind": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
