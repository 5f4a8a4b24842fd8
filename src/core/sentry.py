"""
Sentry Integration - Error Tracking

Sentry captures:
- Unhandled exceptions
- 5xx application errors
- Failed simulation ticks (logged with logger.exception)
"""
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.core.config import Settings
from src.core.logging import get_logger

logger = get_logger(__name__)


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK.

    Returns False when no DSN is configured.
    """
    if not settings.sentry_dsn:
        logger.info("Sentry DSN not configured, skipping initialization")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"garden-telemetry@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
        before_send=_before_send,
    )

    logger.info(
        "Sentry initialized",
        environment=settings.environment,
        dsn_configured=True,
    )
    return True


def _before_send(event, hint):
    """Drop client errors (4xx status codes)."""
    exc_info = hint.get("exc_info")
    if "exception" in event and exc_info:
        _, exc_value, _ = exc_info
        status_code = getattr(exc_value, "status_code", None)
        if status_code is not None and 400 <= status_code < 500:
            return None
    return event
