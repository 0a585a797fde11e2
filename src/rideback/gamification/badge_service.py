"""Badge catalog access and idempotent achievement awarding."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from rideback.alerts.service import create_alert
from rideback.db.models import Badge, UserAchievement
from rideback.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from rideback.gamification.rules import action_count, requirements_met

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rideback.auth.dependencies import CurrentUser

logger = structlog.get_logger()

BADGE_CATEGORIES = ("safety", "community", "activity", "expertise")
BADGE_LEVELS = (1, 2, 3)


@dataclass
class AwardResult:
    """Outcome of one achievement check."""

    checked: int = 0
    new_achievements: list[UserAchievement] = field(default_factory=list)

    @property
    def awarded(self) -> int:
        return len(self.new_achievements)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


async def list_badges(db: AsyncSession) -> list[Badge]:
    """Catalog ordered by level, then category, descending."""
    result = await db.execute(
        select(Badge).order_by(Badge.level.desc(), Badge.category.desc(), Badge.id)
    )
    return list(result.scalars().all())


async def get_badge(db: AsyncSession, badge_id: int) -> Badge:
    result = await db.execute(select(Badge).where(Badge.id == badge_id))
    badge = result.scalar_one_or_none()
    if badge is None:
        msg = "Badge not found"
        raise NotFoundError(msg)
    return badge


async def create_badge(db: AsyncSession, admin: CurrentUser, attrs: dict[str, Any]) -> Badge:
    """
    Add a badge to the catalog.

    Raises:
        AuthorizationError: Caller is not an admin.
        ValidationError: Unknown category/level, requirements without ``type``
            or with a ``count`` that is not a positive integer.
        ConflictError: Slug already in use.
    """
    if not admin.is_admin:
        msg = "You do not have permission to perform this action"
        raise AuthorizationError(msg)
    if attrs["category"] not in BADGE_CATEGORIES:
        raise ValidationError.for_field("category", f"category must be one of {', '.join(BADGE_CATEGORIES)}")
    if attrs["level"] not in BADGE_LEVELS:
        raise ValidationError.for_field("level", "level must be 1, 2 or 3")
    requirements = attrs["requirements"]
    if not isinstance(requirements.get("type"), str) or not requirements["type"]:
        raise ValidationError.for_field("requirements", "requirements must include a 'type'")
    if "count" in requirements:
        count = requirements["count"]
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError.for_field("requirements", "requirements 'count' must be a positive integer")

    slug = attrs.get("slug") or slugify(attrs["name"])
    existing = await db.execute(select(Badge.id).where(Badge.slug == slug))
    if existing.scalar_one_or_none() is not None:
        msg = f"Badge slug already exists: {slug}"
        raise ConflictError(msg)

    badge = Badge(
        slug=slug,
        name=attrs["name"],
        description=attrs["description"],
        image_url=attrs["image_url"],
        category=attrs["category"],
        level=attrs["level"],
        requirements=requirements,
    )
    db.add(badge)
    await db.flush()
    logger.info("badge_created", badge_id=badge.id, slug=slug, admin_id=admin.id)
    return badge


async def list_achievements(db: AsyncSession, user: CurrentUser) -> list[UserAchievement]:
    """The user's earned badges, newest first."""
    result = await db.execute(
        select(UserAchievement)
        .where(UserAchievement.user_id == user.id)
        .order_by(UserAchievement.completed_at.desc(), UserAchievement.id.desc())
    )
    return list(result.scalars().all())


async def has_achievement(db: AsyncSession, user_id: int, badge_id: int) -> bool:
    """Check if user already holds a specific badge."""
    result = await db.execute(
        select(UserAchievement.id).where(
            UserAchievement.user_id == user_id,
            UserAchievement.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def award_badge(
    db: AsyncSession,
    user_id: int,
    badge: Badge,
    progress: dict[str, Any],
) -> UserAchievement | None:
    """
    Insert the achievement and its alert. Returns None if already held.

    Raises:
        IntegrityError: A concurrent check inserted the same (user, badge) first.
    """
    if await has_achievement(db, user_id, badge.id):
        return None

    achievement = UserAchievement(user_id=user_id, badge_id=badge.id, badge=badge, progress=progress)
    db.add(achievement)
    await db.flush()

    await create_alert(
        db,
        user_id,
        title=f"New badge: {badge.name}",
        message=f'Congratulations! You earned "{badge.name}": {badge.description}',
        type_="achievement",
        related_entity=("badge", badge.id),
    )
    return achievement


async def check_and_award(
    db: AsyncSession,
    user: CurrentUser,
    action: str,
    data: dict[str, Any] | None = None,
) -> AwardResult:
    """
    Evaluate every badge tagged with ``action`` and award the ones now met.

    Awards and their alerts commit together; repeated calls never duplicate.
    """
    data = data or {}
    candidates = [b for b in await list_badges(db) if (b.requirements or {}).get("type") == action]
    result = AwardResult(checked=len(candidates))
    if not candidates:
        return result

    try:
        count = await action_count(db, user.id, action, data)
        for badge in candidates:
            if not requirements_met(badge.requirements, count, data):
                continue
            achievement = await award_badge(db, user.id, badge, {"action": action, "data": data})
            if achievement is not None:
                result.new_achievements.append(achievement)
        await db.commit()
    except IntegrityError:
        # A concurrent check won the race; its awards stand and ours are discarded.
        await db.rollback()
        logger.info("badge_award_race", user_id=user.id, action=action)
        return AwardResult(checked=len(candidates))
    except Exception:
        await db.rollback()
        raise

    if result.awarded:
        logger.info(
            "badge_awarded",
            user_id=user.id,
            action=action,
            slugs=[a.badge.slug for a in result.new_achievements],
        )
    return result
