"""Pydantic schemas for profile endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field

from rideback.auth.schemas import UserResponse
from rideback.schemas import CamelModel


class ProfileResponse(UserResponse):
    bikes_count: int = 0
    active_theft_reports_count: int = 0


class ProfileUpdateRequest(CamelModel):
    username: str | None = Field(None, min_length=3, max_length=64)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=32)
    first_name: str | None = Field(None, max_length=64)
    last_name: str | None = Field(None, max_length=64)
    profile_picture: str | None = None
