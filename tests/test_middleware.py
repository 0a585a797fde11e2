"""Middleware tests: request ID, rate limiting, CORS, error handling."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

import rideback.middleware.rate_limit as rate_limit


class _FakePipeline:
    def __init__(self, store: dict[str, int]) -> None:
        self.store = store

    def incr(self, key: str) -> None:
        pass

    def expire(self, key: str, seconds: int) -> None:
        pass

    async def execute(self) -> list[object]:
        # One counter for all windows, so the test cannot straddle a window edge.
        self.store["hits"] = self.store.get("hits", 0) + 1
        return [self.store["hits"], True]


class _FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, int] = {}

    def pipeline(self) -> _FakePipeline:
        return _FakePipeline(self.store)


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> _FakeRedis:
    fake = _FakeRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)
    return fake


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_headers_without_redis(client: AsyncClient) -> None:
    """Without Redis, requests pass through unthrottled."""
    response = await client.get("/version")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient, fake_redis: _FakeRedis) -> None:
    """Rate limit headers are present on non-exempt endpoints."""
    response = await client.get("/version")
    assert response.headers["x-ratelimit-limit"] == "100"
    assert response.headers["x-ratelimit-remaining"] == "99"


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, fake_redis: _FakeRedis) -> None:
    """101st request in a window returns 429 with Retry-After header."""
    for _ in range(100):
        await client.get("/version")
    response = await client.get("/version")
    assert response.status_code == 429
    assert "retry-after" in response.headers
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient, fake_redis: _FakeRedis) -> None:
    for _ in range(150):
        response = await client.get("/health")
        assert response.status_code == 200
    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/api/search",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with a message body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/bikes")
    assert response.status_code == 401
    assert response.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_garbage_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/bikes", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_request_shape_errors_are_400(authed_client: AsyncClient) -> None:
    """Malformed bodies return 400 with field-level issues, not 422."""
    response = await authed_client.post("/api/bikes", json={"brand": "Trek"})
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation error"
    fields = {e["field"] for e in data["errors"]}
    assert {"model", "serialNumber"} <= fields
