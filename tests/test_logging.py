"""
Logging Tests - processor chain and per-tick context
"""
import structlog

from src.core.logging import SERVICE_NAME, add_service_info, build_processors, tick_context


def test_service_info_stamped():
    event = add_service_info(None, "info", {"event": "Scheduler started"})
    assert event["service"] == SERVICE_NAME
    assert "version" in event
    assert "environment" in event


def test_service_info_keeps_explicit_fields():
    event = add_service_info(None, "info", {"event": "x", "service": "other"})
    assert event["service"] == "other"


def test_renderer_per_environment():
    assert isinstance(build_processors("production")[-1], structlog.processors.JSONRenderer)
    assert isinstance(build_processors("testing")[-1], structlog.processors.JSONRenderer)
    assert isinstance(build_processors("development")[-1], structlog.dev.ConsoleRenderer)


def test_context_merged_before_service_info():
    processors = build_processors("production")
    assert processors[0] is structlog.contextvars.merge_contextvars
    assert processors[1] is add_service_info


def test_tick_context_bound_and_restored():
    structlog.contextvars.clear_contextvars()

    with tick_context("garden-simulation", 3, phase="step"):
        bound = structlog.contextvars.get_contextvars()
        assert bound == {"scheduler": "garden-simulation", "tick_number": 3, "phase": "step"}

    assert structlog.contextvars.get_contextvars() == {}
