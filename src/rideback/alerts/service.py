"""Alert creation and read-state management.

Alerts are persisted per user and only ever change through the read flag.

Types: notification, match, update, achievement
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select

from rideback.db.models import Alert
from rideback.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rideback.auth.dependencies import CurrentUser

logger = structlog.get_logger()

VALID_TYPES = {"notification", "match", "update", "achievement"}


async def create_alert(
    db: AsyncSession,
    user_id: int,
    title: str,
    message: str,
    type_: str,
    related_entity: tuple[str, int] | None = None,
) -> Alert:
    """Create an unread alert. ``related_entity`` is an optional (type, id) pair."""
    if type_ not in VALID_TYPES:
        raise ValueError(f"Invalid alert type: {type_}. Must be one of {VALID_TYPES}")

    related_type, related_id = related_entity if related_entity else (None, None)
    alert = Alert(
        user_id=user_id,
        title=title,
        message=message,
        type=type_,
        related_entity_type=related_type,
        related_entity_id=related_id,
        read=False,
    )
    db.add(alert)
    await db.flush()
    logger.info("alert_created", alert_id=alert.id, user_id=user_id, type=type_)
    return alert


async def list_alerts(db: AsyncSession, user: CurrentUser) -> list[Alert]:
    """The caller's alerts, most recent first."""
    result = await db.execute(
        select(Alert)
        .where(Alert.user_id == user.id)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
    )
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, user: CurrentUser, alert_id: int) -> Alert:
    """
    Mark one of the caller's alerts as read. Re-marking is a no-op.

    Raises:
        NotFoundError: If the alert does not exist or belongs to someone else.
    """
    result = await db.execute(
        select(Alert).where(Alert.id == alert_id, Alert.user_id == user.id)
    )
    alert = result.scalar_one_or_none()
    if alert is None:
        msg = "Alert not found"
        raise NotFoundError(msg)

    if not alert.read:
        alert.read = True
        await db.flush()
    return alert


async def get_unread_count(db: AsyncSession, user: CurrentUser) -> int:
    """Count of the caller's unread alerts."""
    result = await db.execute(
        select(func.count())
        .select_from(Alert)
        .where(Alert.user_id == user.id, Alert.read.is_(False))
    )
    return result.scalar_one()
