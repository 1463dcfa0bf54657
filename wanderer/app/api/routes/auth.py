"""Account endpoints - POST /auth/signup, POST /auth/login, GET /auth/me."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field, StringConstraints
from starlette.concurrency import run_in_threadpool

from wanderer.app.api.auth import get_current_context
from wanderer.app.api.security import create_access_token, hash_password, verify_password
from wanderer.app.config import Settings, get_settings
from wanderer.app.db.context import RequestContext
from wanderer.app.db.engine import get_user_repository
from wanderer.app.db.repositories import DuplicateEmailError, UserRepository
from wanderer.app.models.common import WireModel
from wanderer.app.models.itinerary import User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class SignupRequest(WireModel):
    """Request body for POST /auth/signup."""

    name: NonBlank
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(WireModel):
    """Request body for POST /auth/login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(WireModel):
    """Response for signup, login and /me."""

    success: bool
    user: User | None = None
    token: str | None = None
    message: str | None = None


@router.post(
    "/signup",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    request: SignupRequest,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create an account and return a bearer token for it."""
    password_hash = await run_in_threadpool(hash_password, request.password)

    try:
        record = await run_in_threadpool(
            lambda: users.create_user(
                name=request.name, email=request.email, password_hash=password_hash
            )
        )
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        ) from e

    logger.info(f"Created account {record.user_id}")

    return AuthResponse(
        success=True,
        user=record.to_public(),
        token=create_access_token(record.user_id, settings),
        message="Account created successfully",
    )


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    request: LoginRequest,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Verify credentials and return a fresh bearer token."""
    record = await run_in_threadpool(users.get_user_by_email, request.email)

    valid = record is not None and await run_in_threadpool(
        verify_password, request.password, record.password_hash
    )
    if record is None or not valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return AuthResponse(
        success=True,
        user=record.to_public(),
        token=create_access_token(record.user_id, settings),
        message="Login successful",
    )


@router.get("/me", response_model=AuthResponse, response_model_exclude_none=True)
def me(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> AuthResponse:
    """Return the authenticated user's profile."""
    record = users.get_user(ctx.user_id)

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return AuthResponse(success=True, user=record.to_public())
