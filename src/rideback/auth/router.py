"""Authentication router: /api/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.dependencies import CurrentUser, get_current_user
from rideback.auth.jwt import create_access_token
from rideback.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from rideback.auth.service import authenticate_user, change_password, get_user_by_id, register_user
from rideback.database import get_session
from rideback.db.models import User
from rideback.errors import NotFoundError

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.username),
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Create an account and return an access token."""
    user = await register_user(
        db,
        username=body.username,
        password=body.password,
        email=body.email,
        phone=body.phone,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    await db.commit()
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Exchange username + password for an access token."""
    user = await authenticate_user(db, body.username, body.password)
    await db.commit()
    logger.info("user_logged_in", user_id=user.id)
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Return the signed-in account."""
    user = await get_user_by_id(db, current.id)
    if user is None:
        msg = "User not found"
        raise NotFoundError(msg)
    return UserResponse.model_validate(user)


@router.post("/change-password")
async def change_password_route(
    body: ChangePasswordRequest,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> dict[str, str]:
    """Set a new password. Issued tokens stay valid until they expire."""
    await change_password(db, current.id, body.current_password, body.new_password)
    await db.commit()
    return {"status": "password_changed"}
