"""Structured logging with correlation IDs.

Configures structlog for console output in development and JSON lines
elsewhere. Request middleware binds a correlation id into the context so
every event emitted while serving a request carries it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .config import Settings, get_settings

DEFAULT_LOGGER_NAME = "mockapi"


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Keep the name bound by get_logger; PrintLogger itself carries none."""
    event_dict.setdefault("logger", getattr(logger, "name", None) or DEFAULT_LOGGER_NAME)
    return event_dict


def _level(settings: Settings) -> int:
    level = getattr(logging, settings.log_level, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.
    """
    if settings is None:
        settings = get_settings()
    level = _level(settings)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Third-party libraries (uvicorn, sqlalchemy) keep the stdlib logger.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, defaulting to the service logger name."""
    return structlog.get_logger().bind(logger=name or DEFAULT_LOGGER_NAME)


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Drop request-scoped context so it does not leak between requests."""
    structlog.contextvars.clear_contextvars()
