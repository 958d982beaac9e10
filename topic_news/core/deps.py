"""FastAPI dependencies for authentication."""

from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from topic_news.core.logging import get_logger
from topic_news.core.security import ACCESS_TOKEN_TYPE, verify_token

logger = get_logger(__name__)

# auto_error is off so a missing header yields 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from a bearer token."""

    id: str


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUser:
    """
    Resolve the caller from the Authorization header.

    Args:
        credentials: HTTP Bearer credentials, if any were sent

    Returns:
        The authenticated user

    Raises:
        HTTPException: 401 if the token is missing, invalid or not an access token
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise credentials_exception

    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise credentials_exception from None

    user_id = payload.get("sub")
    if not user_id or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise credentials_exception

    return AuthenticatedUser(id=str(user_id))
