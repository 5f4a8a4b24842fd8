"""
Structured Logging Configuration
Uses structlog; every event carries the service name and, inside a
simulation tick, the scheduler name and tick number.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.core.config import settings

SERVICE_NAME = "garden-telemetry"


def add_service_info(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp service, version and environment on every event."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(environment: str) -> list[Processor]:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_info,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if environment == "development":
        return shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]

    # One JSON line per event for log shippers
    return shared_processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging() -> None:
    """Configure structured logging for the application."""
    structlog.configure(
        processors=build_processors(settings.environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )

    # Scrapers hit /metrics every few seconds
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


@contextmanager
def tick_context(scheduler: str, tick_number: int, **extra: Any) -> Iterator[None]:
    """Bind scheduler and tick number to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(scheduler=scheduler, tick_number=tick_number, **extra):
        yield
