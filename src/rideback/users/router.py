"""Profile router: /api/profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.dependencies import CurrentUser, get_current_user
from rideback.auth.schemas import UserResponse
from rideback.database import get_session
from rideback.users.schemas import ProfileResponse, ProfileUpdateRequest
from rideback.users.service import Profile, get_profile, update_profile

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _profile_response(profile: Profile) -> ProfileResponse:
    base = UserResponse.model_validate(profile.user).model_dump()
    return ProfileResponse(
        **base,
        bikes_count=profile.bikes_count,
        active_theft_reports_count=profile.active_theft_reports_count,
    )


@router.get("", response_model=ProfileResponse)
async def read_profile(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Get the caller's profile with bike and report counts."""
    return _profile_response(await get_profile(db, user))


@router.patch("", response_model=ProfileResponse)
async def edit_profile(
    body: ProfileUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Update the caller's profile."""
    await update_profile(db, user, body.model_dump(exclude_unset=True))
    await db.commit()
    return _profile_response(await get_profile(db, user))
