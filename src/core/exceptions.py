"""
Global Exception Handling
Custom exceptions and FastAPI exception handlers.

Error Response Format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human readable message",
        "details": {},
        "request_id": "uuid",
        "timestamp": "ISO8601"
    }
}
"""
import uuid
from datetime import datetime, timezone
from typing import Any

import sentry_sdk
from fastapi import HTTPException, Request, status
from fastapi.responses import ORJSONResponse

from src.core.logging import get_logger

logger = get_logger(__name__)


def _get_request_id(request: Request) -> str:
    """Get or generate request ID for tracing."""
    return request.headers.get("X-Request-ID", str(uuid.uuid4()))


class GardenException(Exception):
    """Base exception for the garden telemetry service."""

    def __init__(
        self,
        message: str = "An error occurred",
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(GardenException):
    """Startup configuration is inconsistent. Fatal."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, details=details)


class DuplicateMetricError(ConfigurationError):
    """A metric name was registered twice."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Metric '{name}' is already registered",
            code="DUPLICATE_METRIC",
            details={"name": name},
        )


class UnknownMetricError(GardenException):
    """Metric name was never registered."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Metric '{name}' is not registered",
            code="UNKNOWN_METRIC",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"name": name},
        )


class InvalidMetricValueError(GardenException):
    """Gauge value not finite, or counter delta negative."""

    def __init__(self, name: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid value {value!r} for metric '{name}': {reason}",
            code="INVALID_METRIC_VALUE",
            status_code=422,
            details={"name": name, "value": repr(value), "reason": reason},
        )


class InvariantViolationError(GardenException):
    """Simulated state left its documented range."""

    def __init__(self, field: str, value: float, low: float, high: float):
        super().__init__(
            message=f"{field}={value} outside [{low}, {high}]",
            code="INVARIANT_VIOLATION",
            details={"field": field, "value": value, "low": low, "high": high},
        )


class ContextNotReadyError(GardenException):
    """Read path invoked before the garden context was initialised."""

    def __init__(self):
        super().__init__(
            message="Garden context is not initialised",
            code="SERVICE_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


def _build_error_response(
    code: str,
    message: str,
    status_code: int,
    request: Request,
    details: dict | None = None,
) -> ORJSONResponse:
    """Build standardized error response."""
    request_id = _get_request_id(request)
    timestamp = datetime.now(timezone.utc).isoformat()

    return ORJSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
                "timestamp": timestamp,
                "path": str(request.url.path),
                "method": request.method,
            }
        },
        headers={"X-Request-ID": request_id},
    )


async def garden_exception_handler(request: Request, exc: GardenException) -> ORJSONResponse:
    """Handler for GardenException."""
    request_id = _get_request_id(request)

    logger.warning(
        "Application error",
        error_code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        request_id=request_id,
        path=str(request.url.path),
        method=request.method,
    )

    if exc.status_code >= 500:
        sentry_sdk.capture_exception(exc)

    return _build_error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        request=request,
        details=exc.details,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> ORJSONResponse:
    """Handler for HTTPException."""
    request_id = _get_request_id(request)

    code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_ERROR",
        503: "SERVICE_UNAVAILABLE",
    }

    error_code = code_map.get(exc.status_code, "HTTP_ERROR")

    logger.warning(
        "HTTP error",
        error_code=error_code,
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=request_id,
        path=str(request.url.path),
    )

    return _build_error_response(
        code=error_code,
        message=str(exc.detail),
        status_code=exc.status_code,
        request=request,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Handler for unhandled exceptions."""
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        request_id=request_id,
        path=str(request.url.path),
        method=request.method,
        error_type=type(exc).__name__,
        error_message=str(exc),
    )

    sentry_sdk.capture_exception(exc)

    return _build_error_response(
        code="INTERNAL_ERROR",
        message="An unexpected error occurred. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        request=request,
        details={"error_id": request_id},
    )
