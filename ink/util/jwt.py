"""Identity token codec.

The session identity provider signs a short JWT per signed-in user with a
secret shared with this service. Claims:

    sub    user id
    email  user email (optional)
    name   display name (optional)
    iat    issued at
    exp    expiry
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from ink.config import AuthSettings


class TokenPayload(BaseModel):
    """Identity carried by a verified token."""

    user_id: str
    email: str | None = None
    display_name: str | None = None
    exp: datetime


class JWTError(Exception):
    """Token could not be verified."""

    pass


def create_token(
    user_id: str,
    email: str | None,
    display_name: str | None,
    settings: AuthSettings,
) -> str:
    """Sign an identity token.

    Used by tests and local tooling; production tokens come from the
    identity provider.
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email,
        "name": display_name,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Check signature and expiry, then map claims to a payload.

    Raises:
        JWTError: If the token is expired, tampered with or missing claims
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise JWTError(f"Invalid token: {e}") from e

    return TokenPayload(
        user_id=claims["sub"],
        email=claims.get("email"),
        display_name=claims.get("name"),
        exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
