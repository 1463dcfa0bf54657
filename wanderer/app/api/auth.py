"""Bearer-token auth dependency."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from wanderer.app.api.security import InvalidTokenError, decode_access_token
from wanderer.app.config import Settings, get_settings
from wanderer.app.db.context import RequestContext


async def get_current_context(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Args:
        settings: Token secret and algorithm
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestContext with user_id

    Raises:
        HTTPException: 401 if no bearer token is present, 403 if it is invalid
    """
    scheme, _, token = (authorization or "").partition(" ")

    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = decode_access_token(token.strip(), settings)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        ) from e

    return RequestContext(user_id=user_id)
