"""
structlog setup for fanhub.

Every record carries the request id (and, once authentication has resolved
the caller, the user id) through structlog's contextvars store, so service
code only ever passes domain fields such as fanwork_id or report_id.

LOG_FORMAT picks the renderer: "console" for local reading, anything else
for one JSON object per line.
"""

import logging
import sys
from typing import cast

import structlog
from structlog.types import Processor

from fanhub.config import settings

REQUEST_ID_KEY = "request_id"
USER_ID_KEY = "user_id"

# Loggers that drown out request logs at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "multipart")


def _renderer_chain() -> list[Processor]:
    if settings.LOG_FORMAT == "console":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def _quiet_third_party() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def configure_logging() -> None:
    """Install the structlog pipeline and route stdlib logging to stdout."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            *_renderer_chain(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    _quiet_third_party()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str, user_id: int | None = None) -> None:
    """Start a fresh logging context for one request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**{REQUEST_ID_KEY: request_id})
    if user_id is not None:
        set_user_context(user_id)


def set_user_context(user_id: int) -> None:
    structlog.contextvars.bind_contextvars(**{USER_ID_KEY: user_id})


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_id() -> str | None:
    """Request id of the request being handled, None outside a request."""
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)
