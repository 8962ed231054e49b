"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs a session and none is active."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Sign in required to {operation}")


class NotAuthorizedError(DomainError):
    """Raised when a non-administrator attempts an administrative action."""

    def __init__(self, action: str, user_id: str):
        super().__init__(f"User {user_id} is not authorized to {action}")


class AlreadyDoneError(DomainError):
    """Raised when the relation an operation would create already exists.

    Expected outcome of a duplicate like or vote, including races between
    two sessions of the same account.
    """

    pass


class ConflictError(DomainError):
    """Raised when a transaction keeps losing races and gives up."""

    pass


class StoreUnavailableError(DomainError):
    """Raised when the document store cannot be reached or refuses access."""

    pass


class PollClosedError(DomainError):
    """Raised when voting after the poll window has ended."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Poll on post {post_id} has ended")


class HandleAllocationExhaustedError(DomainError):
    """Raised when no unique handle was found within the attempt budget."""

    def __init__(self, base: str, attempts: int):
        self.base = base
        self.attempts = attempts
        super().__init__(f"No free handle for '{base}' after {attempts} attempts")
