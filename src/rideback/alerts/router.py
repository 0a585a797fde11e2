"""Alert API endpoints: 3 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.alerts.schemas import AlertResponse, MarkReadResponse, UnreadCountResponse
from rideback.alerts.service import get_unread_count, list_alerts, mark_read
from rideback.auth.dependencies import CurrentUser, get_current_user
from rideback.database import get_session

router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


@router.get("", response_model=list[AlertResponse])
async def list_my_alerts(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[AlertResponse]:
    """List the caller's alerts, newest first."""
    alerts = await list_alerts(db, user)
    return [AlertResponse.model_validate(a) for a in alerts]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UnreadCountResponse:
    """Get unread alert count."""
    return UnreadCountResponse(unread_count=await get_unread_count(db, user))


@router.patch("/{alert_id}/read", response_model=MarkReadResponse)
async def mark_alert_read(
    alert_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MarkReadResponse:
    """Mark an alert as read."""
    alert = await mark_read(db, user, alert_id)
    await db.commit()
    return MarkReadResponse(alert=AlertResponse.model_validate(alert))
