"""Optional Redis connection, used for rate limiting only."""

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()

_client: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Create the shared client. An empty URL leaves Redis disabled."""
    global _client  # noqa: PLW0603
    if not url:
        logger.info("redis_disabled")
        return
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        health_check_interval=30,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """Return the shared client.

    Raises:
        RuntimeError: If Redis is disabled or not yet initialized.
    """
    if _client is None:
        msg = "Redis is not configured"
        raise RuntimeError(msg)
    return _client
