"""Password hashing and bearer token issuance."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from wanderer.app.config import Settings


class InvalidTokenError(Exception):
    """Bearer token is malformed, tampered with, or expired."""

    pass


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user_id: UUID, settings: Settings, now: datetime | None = None) -> str:
    """Issue a signed access token for a user.

    Args:
        user_id: Subject of the token
        settings: Secret, algorithm and TTL
        now: Issue time (for testing)

    Returns:
        Encoded JWT
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.access_token_ttl_minutes),
    }
    return jwt.encode(
        payload, settings.jwt_secret.get_secret_value(), algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str, settings: Settings) -> UUID:
    """Validate a token and return its user ID.

    Raises:
        InvalidTokenError: If the token cannot be trusted
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        return UUID(payload["sub"])
    except (jwt.PyJWTError, ValueError) as e:
        raise InvalidTokenError(str(e)) from e
