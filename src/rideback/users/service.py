"""Profile reads and edits for the signed-in user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from rideback.auth.service import get_user_by_id
from rideback.db.models import Bike, TheftReport, User
from rideback.errors import ConflictError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rideback.auth.dependencies import CurrentUser

logger = structlog.get_logger()

CLEARABLE_FIELDS = ("email", "phone", "first_name", "last_name", "profile_picture")
PROFILE_FIELDS = ("username", *CLEARABLE_FIELDS)


@dataclass(frozen=True)
class Profile:
    user: User
    bikes_count: int
    active_theft_reports_count: int


async def _load_user(db: AsyncSession, user_id: int) -> User:
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "User not found"
        raise NotFoundError(msg)
    return user


async def get_profile(db: AsyncSession, current: CurrentUser) -> Profile:
    """Account fields plus bike and active-report counts."""
    user = await _load_user(db, current.id)
    bikes_count = (
        await db.execute(select(func.count()).select_from(Bike).where(Bike.user_id == user.id))
    ).scalar_one()
    active_reports = (
        await db.execute(
            select(func.count())
            .select_from(TheftReport)
            .where(TheftReport.user_id == user.id, TheftReport.status == "active")
        )
    ).scalar_one()
    return Profile(user=user, bikes_count=bikes_count, active_theft_reports_count=active_reports)


async def update_profile(db: AsyncSession, current: CurrentUser, changes: dict[str, Any]) -> User:
    """
    Update profile fields.

    Raises:
        ConflictError: If the new username is already taken (case-insensitive).
    """
    user = await _load_user(db, current.id)

    username = changes.get("username")
    if username is not None and username.lower() != user.username.lower():
        result = await db.execute(
            select(User.id)
            .where(func.lower(User.username) == username.lower())
            .where(User.id != user.id)
        )
        if result.scalar_one_or_none() is not None:
            msg = "Username already taken"
            raise ConflictError(msg)

    for field in PROFILE_FIELDS:
        if field not in changes:
            continue
        # Contact fields may be cleared with an explicit null; username may not.
        if changes[field] is None and field not in CLEARABLE_FIELDS:
            continue
        setattr(user, field, changes[field])

    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Username already taken"
        raise ConflictError(msg) from e

    logger.info("profile_updated", user_id=user.id, fields=sorted(k for k in changes if k in PROFILE_FIELDS))
    return user
