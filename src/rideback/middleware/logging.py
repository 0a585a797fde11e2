"""structlog configuration.

Log lines are JSON in deployed environments and pretty-printed locally
(``RIDEBACK_LOG_FORMAT=console``). Every event carries the service name and
environment, plus whatever the request middleware bound to the context.
"""

import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from rideback.config import Settings

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "uvicorn.access")


def _service_context(settings: Settings) -> Processor:
    def add_service(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", "rideback-api")
        event_dict.setdefault("env", settings.environment)
        return event_dict

    return add_service


def setup_logging(settings: Settings) -> None:
    """Configure structlog over stdlib logging."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_context(settings),
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
