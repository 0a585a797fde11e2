"""Shared test fixtures.

Every test gets a fresh SQLite database under ``tmp_path``; Redis is left
unconfigured so rate limiting passes requests through.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from typing import Any

os.environ["RIDEBACK_REDIS_URL"] = ""
os.environ["RIDEBACK_LOG_FORMAT"] = "console"
os.environ["RIDEBACK_ADMIN_USER_IDS"] = "[]"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from rideback.auth.jwt import create_access_token  # noqa: E402
from rideback.auth.service import register_user  # noqa: E402
from rideback.config import get_settings  # noqa: E402
from rideback.database import close_db, create_tables, get_session, init_db  # noqa: E402
from rideback.gamification.seed import seed_badges  # noqa: E402
from rideback.main import create_app  # noqa: E402

TEST_PASSWORD = "hunter22"

BIKE_PAYLOAD: dict[str, Any] = {
    "brand": "Trek",
    "model": "FX 3",
    "type": "hybrid",
    "year": 2022,
    "color": "Black",
    "frameSize": "M",
    "serialNumber": "WTU123456",
}


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def create_user(username: str, *, is_admin: bool = False, **profile: Any) -> tuple[int, str]:
    """Insert a user directly and return (user_id, access_token)."""
    async for db in get_session():
        user = await register_user(db, username=username, password=TEST_PASSWORD, **profile)
        user.is_admin = is_admin
        await db.commit()
        return user.id, create_access_token(user.id, user.username)
    msg = "no session"
    raise RuntimeError(msg)


@pytest_asyncio.fixture
async def client(tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a freshly created schema with the badge catalog seeded."""
    get_settings.cache_clear()
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'rideback.db'}")
    await create_tables()
    async for db in get_session():
        await seed_badges(db)
        break

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_db()


@pytest_asyncio.fixture
async def alice(client: AsyncClient) -> dict[str, Any]:
    """Primary test user with profile contact details."""
    user_id, token = await create_user(
        "alice",
        email="alice@example.com",
        phone="050-1234567",
        first_name="Alice",
        last_name="Cohen",
    )
    return {"id": user_id, "token": token, "headers": auth_headers(token)}


@pytest_asyncio.fixture
async def bob(client: AsyncClient) -> dict[str, Any]:
    """Second user, for ownership checks."""
    user_id, token = await create_user("bob")
    return {"id": user_id, "token": token, "headers": auth_headers(token)}


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, alice: dict[str, Any]) -> AsyncClient:
    """Client authenticated as alice."""
    client.headers.update(alice["headers"])
    return client


@pytest_asyncio.fixture
async def db_session(client: AsyncClient) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for test assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def admin(client: AsyncClient) -> dict[str, Any]:
    """User with the admin flag set."""
    user_id, token = await create_user("root_admin", is_admin=True)
    return {"id": user_id, "token": token, "headers": auth_headers(token)}


@pytest_asyncio.fixture
async def make_bike() -> Callable[..., Awaitable[dict[str, Any]]]:
    """Register a bike through the API; keyword overrides patch the default payload."""

    async def _make(client: AsyncClient, headers: dict[str, str] | None = None, **overrides: Any) -> dict[str, Any]:
        response = await client.post("/api/bikes", json={**BIKE_PAYLOAD, **overrides}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest_asyncio.fixture
async def make_report() -> Callable[..., Awaitable[dict[str, Any]]]:
    """File a theft report through the API."""

    async def _make(
        client: AsyncClient,
        bike_id: int,
        headers: dict[str, str] | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        payload = {
            "bikeId": bike_id,
            "theftDate": date.today().isoformat(),
            "theftLocation": "Tel Aviv, Rothschild Blvd",
            **overrides,
        }
        response = await client.post("/api/reports", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
