"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from rideback.auth.password import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from rideback.schemas import CamelModel


class RegisterRequest(CamelModel):
    """Account registration request."""

    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=32)
    first_name: str | None = Field(None, max_length=64)
    last_name: str | None = Field(None, max_length=64)


class LoginRequest(CamelModel):
    """Login with username + password."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


class UserResponse(CamelModel):
    """Own account, as returned to the signed-in user."""

    id: int
    username: str
    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    is_admin: bool = False
    created_at: datetime


class TokenResponse(CamelModel):
    """Access token plus the authenticated user."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
