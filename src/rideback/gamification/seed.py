"""Badge catalog seed data. Seeding is keyed by slug and never overwrites."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from rideback.db.models import Badge

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

BADGE_SEED_DATA: list[dict[str, Any]] = [
    # Safety
    {
        "slug": "helmet",
        "name": "Helmet On",
        "description": "Added a new helmet to your profile",
        "image_url": "/badges/helmet.svg",
        "category": "safety",
        "level": 1,
        "requirements": {"type": "profile_update", "field": "helmet", "value": True},
    },
    {
        "slug": "safe_rider",
        "name": "Safe Rider",
        "description": "Completed the safety guide",
        "image_url": "/badges/safe_rider.svg",
        "category": "safety",
        "level": 1,
        "requirements": {"type": "guide_completion", "guideId": "safety_guide"},
    },
    # Community
    {
        "slug": "community_member",
        "name": "Community Member",
        "description": "Joined the RideBack community",
        "image_url": "/badges/community_member.svg",
        "category": "community",
        "level": 1,
        "requirements": {"type": "registration"},
    },
    {
        "slug": "helper",
        "name": "Helper",
        "description": "Got a stolen bike back to its rider",
        "image_url": "/badges/helper.svg",
        "category": "community",
        "level": 2,
        "requirements": {"type": "bike_found", "count": 1},
    },
    {
        "slug": "savior",
        "name": "Savior",
        "description": "Got five stolen bikes back to their riders",
        "image_url": "/badges/savior.svg",
        "category": "community",
        "level": 3,
        "requirements": {"type": "bike_found", "count": 5},
    },
    # Activity
    {
        "slug": "first_bike",
        "name": "Registered Rider",
        "description": "Registered your first bike",
        "image_url": "/badges/registered_bike.svg",
        "category": "activity",
        "level": 1,
        "requirements": {"type": "bike_registration", "count": 1},
    },
    {
        "slug": "collector",
        "name": "Collector",
        "description": "Registered three bikes",
        "image_url": "/badges/collector.svg",
        "category": "activity",
        "level": 2,
        "requirements": {"type": "bike_registration", "count": 3},
    },
    # Expertise
    {
        "slug": "beginner_expert",
        "name": "Beginner Expert",
        "description": "Completed the basic maintenance guide",
        "image_url": "/badges/beginner_expert.svg",
        "category": "expertise",
        "level": 1,
        "requirements": {"type": "guide_completion", "guideId": "basic_maintenance"},
    },
    {
        "slug": "amateur_mechanic",
        "name": "Amateur Mechanic",
        "description": "Completed the advanced maintenance guide",
        "image_url": "/badges/amateur_mechanic.svg",
        "category": "expertise",
        "level": 2,
        "requirements": {"type": "guide_completion", "guideId": "advanced_maintenance"},
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Insert catalog badges whose slug is missing. Returns the number inserted."""
    existing = set((await db.execute(select(Badge.slug))).scalars().all())
    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        if badge_data["slug"] in existing:
            continue
        db.add(Badge(**badge_data))
        seeded += 1

    await db.commit()
    logger.info("badges_seeded", inserted=seeded, total=len(BADGE_SEED_DATA))
    return seeded
