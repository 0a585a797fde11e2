"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from rideback.alerts.router import router as alerts_router
from rideback.auth.router import router as auth_router
from rideback.bikes.router import router as bikes_router
from rideback.config import get_settings
from rideback.database import close_db, create_tables, get_session, init_db
from rideback.gamification.router import router as gamification_router
from rideback.gamification.seed import seed_badges
from rideback.health.router import router as health_router
from rideback.middleware import setup_middleware
from rideback.redis_client import close_redis, init_redis
from rideback.reports.router import router as reports_router
from rideback.search.router import router as search_router
from rideback.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.auto_create_tables:
        await create_tables()
    await init_redis(settings.redis_url)

    if settings.seed_badges:
        async for db in get_session():
            await seed_badges(db)
            break

    logger.info("app_started", environment=settings.environment, version=settings.app_version)
    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="RideBack API",
        description="Bicycle theft registry: bikes, theft reports, public search, alerts and badges",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(bikes_router)
    app.include_router(reports_router)
    app.include_router(search_router)
    app.include_router(alerts_router)
    app.include_router(gamification_router)

    return app


app = create_app()
