"""Pydantic schemas for badge and achievement endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from rideback.schemas import CamelModel


class BadgeResponse(CamelModel):
    id: int
    slug: str
    name: str
    description: str
    image_url: str
    category: str
    level: int
    requirements: dict[str, Any]
    created_at: datetime


class BadgeCreateRequest(CamelModel):
    """Admin-only catalog addition. ``slug`` defaults to a slugified name."""

    slug: str | None = Field(None, min_length=1, max_length=64, pattern=r"^[a-z0-9_]+$")
    name: str = Field(..., min_length=1, max_length=128)
    description: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1, max_length=256)
    category: str
    level: int = 1
    requirements: dict[str, Any]


class AchievementResponse(CamelModel):
    id: int
    user_id: int
    badge_id: int
    completed_at: datetime
    progress: dict[str, Any] | None = None
    badge: BadgeResponse


class AchievementCheckRequest(CamelModel):
    action: str = Field(..., min_length=1, max_length=64)
    data: dict[str, Any] = Field(default_factory=dict)


class NewAchievement(CamelModel):
    achievement: AchievementResponse
    badge: BadgeResponse


class AchievementCheckResponse(CamelModel):
    checked: int
    awarded: int
    new_achievements: list[NewAchievement]
