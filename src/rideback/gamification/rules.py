"""
Requirement rules for badges.

A badge's ``requirements`` is a JSON object tagged with ``type``; a badge is a
candidate for an action when the tag equals the action name. Remaining keys:

- ``count``: the action counter must reach this value. Actions with a
  counter below derive it from stored data; others use ``data["count"]``.
  The counter is never below 1 because the action just happened.
- anything else: must equal the same key in the action data.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from rideback.db.models import Bike

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

ActionCounter = Callable[["AsyncSession", int], Awaitable[int]]


async def _owned_bikes(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count()).select_from(Bike).where(Bike.user_id == user_id))
    return result.scalar_one()


async def _found_bikes(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Bike).where(Bike.user_id == user_id, Bike.status == "found")
    )
    return result.scalar_one()


ACTION_COUNTERS: dict[str, ActionCounter] = {
    "bike_registration": _owned_bikes,
    "bike_found": _found_bikes,
}


async def action_count(db: AsyncSession, user_id: int, action: str, data: dict[str, Any]) -> int:
    """How many times the user has performed ``action``, at least 1."""
    counter = ACTION_COUNTERS.get(action)
    if counter is not None:
        value = await counter(db, user_id)
    else:
        try:
            value = int(data.get("count", 1))
        except (TypeError, ValueError):
            value = 1
    return max(value, 1)


def requirements_met(requirements: dict[str, Any], count: int, data: dict[str, Any]) -> bool:
    """Evaluate the non-``type`` keys of a badge requirement."""
    for key, expected in requirements.items():
        if key == "type":
            continue
        if key == "count":
            if count < int(expected):
                return False
        elif data.get(key) != expected:
            return False
    return True
