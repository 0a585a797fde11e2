"""Bike registration and editing, always scoped to the owning user.

Status moves ``registered -> stolen -> found`` only through the theft-report
service; nothing here writes ``status`` after creation.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from rideback.config import get_settings
from rideback.db.models import Bike
from rideback.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from rideback.auth.dependencies import CurrentUser

logger = structlog.get_logger()

BIKE_STATUSES = ("registered", "stolen", "found")

MUTABLE_FIELDS = frozenset({
    "brand",
    "model",
    "type",
    "year",
    "color",
    "frame_size",
    "serial_number",
    "additional_info",
    "image_url",
})
_REQUIRED_FIELDS = frozenset({"brand", "model", "type", "year", "color", "serial_number"})


def validate_year(year: int) -> None:
    """Reject model years outside [min_bike_year, current year]."""
    low = get_settings().min_bike_year
    high = date.today().year
    if not low <= year <= high:
        raise ValidationError.for_field("year", f"Year must be between {low} and {high}")


async def get_owned_bike(db: AsyncSession, owner_id: int, bike_id: int) -> Bike:
    """Fetch a bike that belongs to owner_id, or raise NotFoundError."""
    result = await db.execute(
        select(Bike).where(Bike.id == bike_id, Bike.user_id == owner_id)
    )
    bike = result.scalar_one_or_none()
    if bike is None:
        msg = "Bike not found"
        raise NotFoundError(msg)
    return bike


async def list_owned_bikes(db: AsyncSession, owner: CurrentUser) -> list[Bike]:
    """All of the owner's bikes, newest first."""
    result = await db.execute(
        select(Bike)
        .where(Bike.user_id == owner.id)
        .order_by(Bike.created_at.desc(), Bike.id.desc())
    )
    return list(result.scalars().all())


async def list_available_bikes(db: AsyncSession, owner: CurrentUser) -> list[Bike]:
    """Bikes that can still be reported stolen (status ``registered``)."""
    result = await db.execute(
        select(Bike)
        .where(Bike.user_id == owner.id, Bike.status == "registered")
        .order_by(Bike.created_at.desc(), Bike.id.desc())
    )
    return list(result.scalars().all())


async def register_bike(db: AsyncSession, owner: CurrentUser, attrs: dict[str, Any]) -> Bike:
    """Create a bike with status ``registered``. No duplicate-serial check is made."""
    validate_year(attrs["year"])
    fields = {k: v for k, v in attrs.items() if k in MUTABLE_FIELDS}

    bike = Bike(user_id=owner.id, status="registered", **fields)
    if bike.image_url:
        bike.image_urls = [bike.image_url]
    db.add(bike)
    await db.flush()

    logger.info("bike_registered", bike_id=bike.id, user_id=owner.id)
    return bike


async def update_bike(
    db: AsyncSession,
    owner: CurrentUser,
    bike_id: int,
    changes: dict[str, Any],
) -> Bike:
    """
    Apply a partial edit to an owned bike.

    Raises:
        NotFoundError: If the bike does not belong to the caller.
        ValidationError: If a required attribute is cleared or the year is out of range.
    """
    bike = await get_owned_bike(db, owner.id, bike_id)

    for field, value in changes.items():
        if field not in MUTABLE_FIELDS:
            continue
        if value is None and field in _REQUIRED_FIELDS:
            raise ValidationError.for_field(field, f"{field} cannot be empty")
        if field == "year":
            validate_year(value)
        setattr(bike, field, value)

    # The primary image is always part of the image list.
    if bike.image_url and bike.image_url not in (bike.image_urls or []):
        bike.image_urls = [bike.image_url, *(bike.image_urls or [])]

    await db.flush()
    logger.info("bike_updated", bike_id=bike.id, fields=sorted(changes))
    return bike


async def attach_images(
    db: AsyncSession,
    owner: CurrentUser,
    bike_id: int,
    image_urls: list[str],
) -> Bike:
    """
    Associate uploaded-image references with an owned bike.

    Every reference is kept (in order, without duplicates); the first one
    becomes the primary image if the bike has none yet.
    """
    bike = await get_owned_bike(db, owner.id, bike_id)

    merged = list(bike.image_urls or [])
    for url in image_urls:
        if url and url not in merged:
            merged.append(url)
    bike.image_urls = merged
    if not bike.image_url and merged:
        bike.image_url = merged[0]

    await db.flush()
    logger.info("bike_images_attached", bike_id=bike.id, count=len(merged))
    return bike
