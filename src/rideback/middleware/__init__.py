"""HTTP middleware and exception handlers for the RideBack API."""

from fastapi import FastAPI

from rideback.config import Settings
from rideback.middleware.cors import setup_cors
from rideback.middleware.error_handler import setup_error_handlers
from rideback.middleware.logging import setup_logging
from rideback.middleware.rate_limit import RateLimitMiddleware
from rideback.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, error handlers and the middleware stack.

    Starlette runs the last-added middleware outermost. Resulting order per
    request: CORS -> request id -> rate limit -> route.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
