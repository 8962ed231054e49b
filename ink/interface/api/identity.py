"""Identity extraction for API routes."""

from ink.domain.error import NotAuthenticatedError
from ink.domain.service import JWTService
from ink.util.jwt import TokenPayload


def require_identity(
    jwt_service: JWTService, auth_token: str | None, operation: str
) -> TokenPayload:
    """Verified identity of the caller.

    Args:
        jwt_service: JWT service for token verification
        auth_token: JWT token from cookie
        operation: What the caller is trying to do, for the error message

    Raises:
        NotAuthenticatedError: If the token is missing, invalid or expired
    """
    payload = jwt_service.get_payload_from_token(auth_token)
    if payload is None:
        raise NotAuthenticatedError(operation)
    return payload
