"""Unit tests for the bearer-token auth dependency."""

import uuid

import pytest
from fastapi import HTTPException
from pydantic import SecretStr

from wanderer.app.api.auth import get_current_context
from wanderer.app.api.security import create_access_token
from wanderer.app.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed signing secret."""
    return Settings(jwt_secret=SecretStr("unit-test-secret-0123456789abcdef"))


@pytest.mark.asyncio
async def test_get_current_context_valid_token(settings: Settings) -> None:
    """A valid bearer token yields the user's context."""
    user_id = uuid.uuid4()
    token = create_access_token(user_id, settings)

    ctx = await get_current_context(settings=settings, authorization=f"Bearer {token}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_get_current_context_scheme_is_case_insensitive(settings: Settings) -> None:
    """'bearer' in lower case is accepted."""
    user_id = uuid.uuid4()
    token = create_access_token(user_id, settings)

    ctx = await get_current_context(settings=settings, authorization=f"bearer {token}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_get_current_context_missing_header(settings: Settings) -> None:
    """No header at all is a 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=settings, authorization=None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Access token required"


@pytest.mark.asyncio
async def test_get_current_context_wrong_scheme(settings: Settings) -> None:
    """A non-bearer scheme is treated as a missing token."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=settings, authorization="Basic dXNlcjpwYXNz")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_context_empty_token(settings: Settings) -> None:
    """'Bearer' with no token is treated as missing."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=settings, authorization="Bearer   ")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_context_invalid_token(settings: Settings) -> None:
    """A token that fails verification is a 403."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=settings, authorization="Bearer not.a.jwt")

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Invalid token"


@pytest.mark.asyncio
async def test_get_current_context_token_from_other_secret(settings: Settings) -> None:
    """Tokens signed with another secret are a 403."""
    token = create_access_token(uuid.uuid4(), Settings(jwt_secret=SecretStr("other-secret-0123456789abcdef0123")))

    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=settings, authorization=f"Bearer {token}")

    assert exc_info.value.status_code == 403
