"""Redis-backed fixed window rate limiting middleware."""

import time
from typing import Any

import structlog
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from rideback.redis_client import get_redis

logger = structlog.get_logger()

# Paths exempt from rate limiting
_EXEMPT_PATHS = frozenset({"/health", "/ready"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limit requests per IP using Redis counters."""

    def __init__(self, app: Any, requests_per_window: int = 100, window_seconds: int = 60) -> None:  # noqa: ANN401
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    async def _hit(self, client_ip: str) -> int | None:
        """Increment the caller's counter; None when Redis is unavailable."""
        window = int(time.time()) // self.window_seconds
        rate_key = f"ratelimit:{client_ip}:{window}"
        try:
            redis = get_redis()
        except RuntimeError:
            return None
        try:
            pipe = redis.pipeline()
            pipe.incr(rate_key)
            pipe.expire(rate_key, self.window_seconds + 1)
            results: list[Any] = await pipe.execute()
        except RedisError:
            logger.warning("rate_limit_unavailable", exc_info=True)
            return None
        return int(results[0])

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Check rate limit, return 429 if exceeded."""
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        current_count = await self._hit(client_ip)
        if current_count is None:
            return await call_next(request)

        if current_count > self.requests_per_window:
            return JSONResponse(
                status_code=429,
                content={"message": "Rate limit exceeded. Try again later."},
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": str(self.requests_per_window),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_window - current_count))
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_window)
        return response
