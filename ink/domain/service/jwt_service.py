"""Identity token domain service."""

import logfire

from ink.config import AuthSettings
from ink.util.jwt import JWTError, TokenPayload, create_token, verify_token


class JWTService:
    """Verifies the identity tokens sent with API requests."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    def create_token(
        self, user_id: str, email: str | None = None, display_name: str | None = None
    ) -> str:
        """Sign a token for a user (tests and local tooling)."""
        return create_token(user_id, email, display_name, self.auth_settings)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a token.

        Raises:
            JWTError: If the token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                return verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("Identity token rejected", error=str(e))
                raise

    def get_payload_from_token(self, token: str | None) -> TokenPayload | None:
        """Identity of an optional token; None when missing or invalid."""
        if not token:
            return None
        try:
            return self.verify_token(token)
        except JWTError:
            return None
