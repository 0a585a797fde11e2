"""Badge catalog and achievement endpoints: 5 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.dependencies import CurrentUser, get_current_user, require_admin
from rideback.database import get_session
from rideback.gamification.badge_service import (
    check_and_award,
    create_badge,
    get_badge,
    list_achievements,
    list_badges,
)
from rideback.gamification.schemas import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    AchievementResponse,
    BadgeCreateRequest,
    BadgeResponse,
    NewAchievement,
)

router = APIRouter(prefix="/api", tags=["Achievements"])


# ── Public endpoints ──


@router.get("/badges", response_model=list[BadgeResponse])
async def get_badges(db: AsyncSession = Depends(get_session)) -> list[BadgeResponse]:
    """Full badge catalog."""
    return [BadgeResponse.model_validate(b) for b in await list_badges(db)]


@router.get("/badges/{badge_id}", response_model=BadgeResponse)
async def get_badge_detail(badge_id: int, db: AsyncSession = Depends(get_session)) -> BadgeResponse:
    return BadgeResponse.model_validate(await get_badge(db, badge_id))


# ── Admin endpoints ──


@router.post("/badges", response_model=BadgeResponse, status_code=201)
async def add_badge(
    body: BadgeCreateRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> BadgeResponse:
    """Add a badge to the catalog."""
    badge = await create_badge(db, admin, body.model_dump())
    await db.commit()
    return BadgeResponse.model_validate(badge)


# ── Authenticated endpoints ──


@router.get("/achievements", response_model=list[AchievementResponse])
async def get_achievements(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[AchievementResponse]:
    """The caller's earned badges, newest first."""
    return [AchievementResponse.model_validate(a) for a in await list_achievements(db, user)]


@router.post("/achievements/check", response_model=AchievementCheckResponse)
async def check_achievements(
    body: AchievementCheckRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AchievementCheckResponse:
    """Evaluate an action against the catalog and award any newly met badges."""
    result = await check_and_award(db, user, body.action, body.data)
    return AchievementCheckResponse(
        checked=result.checked,
        awarded=result.awarded,
        new_achievements=[
            NewAchievement(
                achievement=AchievementResponse.model_validate(a),
                badge=BadgeResponse.model_validate(a.badge),
            )
            for a in result.new_achievements
        ],
    )
