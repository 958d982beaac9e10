"""Security utilities for bearer-token identity."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from topic_news.core.settings import get_settings

ACCESS_TOKEN_TYPE = "access"


def create_token(user_id: str | int, token_type: str, expires_delta: timedelta) -> str:
    """
    Create a signed JWT.

    Args:
        user_id: User ID to encode in the ``sub`` claim
        token_type: Type of token (only ``access`` is accepted by the API)
        expires_delta: Time until the token expires

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str | int) -> str:
    """Create an access token with the configured expiry."""
    settings = get_settings()
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return create_token(user_id, ACCESS_TOKEN_TYPE, expires_delta)


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT.

    Raises:
        jwt.ExpiredSignatureError: If token is expired
        jwt.InvalidTokenError: If token is invalid
    """
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
