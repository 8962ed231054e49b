"""Outcome of an engagement operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

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

T = TypeVar("T")


class FailureKind(str, Enum):
    """Typed reasons an engagement operation did not happen."""

    NOT_AUTHENTICATED = "not_authenticated"
    ALREADY_DONE = "already_done"
    CONFLICT = "conflict"
    STORE_UNAVAILABLE = "store_unavailable"
    NOT_FOUND = "not_found"
    POLL_CLOSED = "poll_closed"
    INVALID = "invalid"
    NOT_AUTHORIZED = "not_authorized"
    # Session signed in but its state not yet reconciled
    NOT_READY = "not_ready"


# Most specific first: lookups walk this list with isinstance
_FAILURE_KINDS: list[tuple[type[DomainError], FailureKind]] = [
    (NotAuthenticatedError, FailureKind.NOT_AUTHENTICATED),
    (AlreadyDoneError, FailureKind.ALREADY_DONE),
    (ConflictError, FailureKind.CONFLICT),
    (StoreUnavailableError, FailureKind.STORE_UNAVAILABLE),
    (NotFoundError, FailureKind.NOT_FOUND),
    (PollClosedError, FailureKind.POLL_CLOSED),
    (NotAuthorizedError, FailureKind.NOT_AUTHORIZED),
    (ValidationError, FailureKind.INVALID),
]


def failure_kind_for(error: DomainError) -> FailureKind:
    """Classify a domain error.

    Errors without a dedicated kind are treated as store failures, the
    generic recoverable outcome.
    """
    for error_type, kind in _FAILURE_KINDS:
        if isinstance(error, error_type):
            return kind
    return FailureKind.STORE_UNAVAILABLE


@dataclass(frozen=True)
class EngagementResult(Generic[T]):
    """Success with a value, or a typed failure with a message."""

    ok: bool
    value: Optional[T] = None
    failure: Optional[FailureKind] = None
    message: str = ""

    @classmethod
    def success(cls, value: Optional[T] = None) -> "EngagementResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, failure: FailureKind, message: str) -> "EngagementResult[T]":
        return cls(ok=False, failure=failure, message=message)

    @classmethod
    def from_error(cls, error: DomainError) -> "EngagementResult[T]":
        return cls.failed(failure_kind_for(error), str(error))
