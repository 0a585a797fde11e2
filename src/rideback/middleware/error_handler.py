"""Global error handlers: consistent JSON error responses.

Every failure body carries a human-readable ``message``; validation failures
add a structured ``errors`` list of field-level issues.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rideback.errors import DomainError, ValidationError

logger = structlog.get_logger()


def _field_path(loc: tuple | list) -> str:
    # Drop the leading "body"/"query"/"path" segment FastAPI prepends.
    parts = [str(p) for p in loc]
    if parts and parts[0] in {"body", "query", "path", "header"}:
        parts = parts[1:]
    return ".".join(parts)


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        """Domain validation failures → 400 with field issues."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "message": exc.message,
                "errors": [{"field": i.field, "message": i.message} for i in exc.issues],
            },
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        logger.info(
            "domain_error",
            path=request.url.path,
            method=request.method,
            error=type(exc).__name__,
            status=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent JSON format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Request shape failures → 400 with field issues."""
        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation error",
                "errors": [{"field": _field_path(e.get("loc", ())), "message": e.get("msg", "")} for e in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: always return JSON, never details."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error"},
        )
