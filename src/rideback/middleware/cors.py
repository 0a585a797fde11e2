"""CORS for the single-page client."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rideback.config import Settings

# Auth travels in the Authorization header, so no cookies cross origins.
_ALLOWED_METHODS = ["GET", "POST", "PATCH", "OPTIONS"]
_EXPOSED_HEADERS = ["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit", "Retry-After"]


def setup_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=_ALLOWED_METHODS,
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=_EXPOSED_HEADERS,
        max_age=600,
    )
