"""Liveness, readiness and version probes (no /api prefix, no auth)."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.config import get_settings
from rideback.database import get_session
from rideback.db.models import Badge
from rideback.redis_client import get_redis

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    response: Response,
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Check the database (including the seeded badge catalog) and Redis.

    An unconfigured Redis counts as ready. Any failing check answers 503.
    """
    checks: dict[str, object] = {}

    try:
        await db.execute(text("SELECT 1"))
        badge = (await db.execute(select(Badge.id).limit(1))).scalar_one_or_none()
        checks["database"] = "ok"
        checks["badges"] = "ok" if badge is not None else "empty"
    except Exception as exc:  # noqa: BLE001
        checks["database"] = f"error: {exc}"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except RuntimeError:
        checks["redis"] = "disabled"
    except Exception as exc:  # noqa: BLE001
        checks["redis"] = f"error: {exc}"

    ready = all(v in {"ok", "disabled", "empty"} for v in checks.values())
    if not ready:
        response.status_code = 503
    return {"status": "ready" if ready else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
