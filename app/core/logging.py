"""
structlog setup for the API.

Every log line is an event name plus key/value pairs. Lines emitted while
a request is being served carry its ``request_id`` and, once the caller is
authenticated, the caller's ``user_id``. ``LOG_FORMAT`` selects JSON lines
(the default) or the coloured console renderer, the latter only honoured
in development.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

from app.config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[int | None] = ContextVar("user_id", default=None)

# Chatty at INFO, not useful for request tracing
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "aiosmtplib")


def add_request_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Copy the request and caller ids into the event."""
    request_id = request_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    user_id = user_id_ctx.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)

    return event_dict


def _renderer() -> Processor:
    if settings.ENVIRONMENT == "development" and settings.LOG_FORMAT == "console":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Install the structlog pipeline and route stdlib logging to stdout."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_request_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger, e.g. ``logger.info("avatar_updated", user_id=1)``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str) -> None:
    """Start tagging log lines with ``request_id``; the caller is unknown until auth runs."""
    request_id_ctx.set(request_id)
    user_id_ctx.set(None)


def bind_user(user_id: int) -> None:
    """Tag the rest of the request's log lines with the authenticated caller."""
    user_id_ctx.set(user_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    user_id_ctx.set(None)
