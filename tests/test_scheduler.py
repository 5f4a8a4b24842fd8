"""
Tick Scheduler Tests.
"""
import asyncio
import time

import pytest
import structlog

from src.modules.garden.scheduler import TickScheduler


class StepRecorder:
    def __init__(self, duration: float = 0.0, fail: bool = False):
        self.duration = duration
        self.fail = fail
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    def __call__(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.calls += 1
            if self.duration:
                time.sleep(self.duration)
            if self.fail:
                raise RuntimeError("boom")
        finally:
            self.in_flight -= 1


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        TickScheduler(lambda: None, interval=0)


@pytest.mark.asyncio
async def test_run_once_steps():
    step = StepRecorder()
    scheduler = TickScheduler(step, interval=1.0)

    assert await scheduler.run_once() is True
    assert await scheduler.run_once() is True
    assert step.calls == 2
    assert scheduler.ticks_run == 2


@pytest.mark.asyncio
async def test_run_once_skips_when_step_in_flight():
    step = StepRecorder()
    scheduler = TickScheduler(step, interval=1.0)

    async with scheduler._lock:
        assert await scheduler.run_once() is False

    assert step.calls == 0
    assert scheduler.ticks_skipped == 1


@pytest.mark.asyncio
async def test_failed_step_does_not_stop_scheduler():
    step = StepRecorder(fail=True)
    scheduler = TickScheduler(step, interval=1.0)

    assert await scheduler.run_once() is True
    assert await scheduler.run_once() is True
    assert scheduler.ticks_failed == 2
    assert scheduler.ticks_run == 0


@pytest.mark.asyncio
async def test_start_and_stop():
    step = StepRecorder()
    scheduler = TickScheduler(step, interval=0.01)

    scheduler.start()
    scheduler.start()  # idempotent
    assert scheduler.running
    await asyncio.sleep(0.1)
    await scheduler.stop()

    assert not scheduler.running
    assert step.calls >= 1
    calls = step.calls
    await asyncio.sleep(0.05)
    assert step.calls == calls


@pytest.mark.asyncio
async def test_stop_without_start():
    scheduler = TickScheduler(StepRecorder(), interval=0.01)
    await scheduler.stop()
    assert not scheduler.running


@pytest.mark.asyncio
async def test_slow_steps_are_skipped_not_overlapped():
    step = StepRecorder(duration=0.03)
    scheduler = TickScheduler(step, interval=0.01)

    scheduler.start()
    await asyncio.sleep(0.2)
    await scheduler.stop()

    assert step.calls >= 1
    assert step.max_in_flight == 1
    assert scheduler.ticks_skipped >= 1


@pytest.mark.asyncio
async def test_drives_simulator(garden_context):
    simulator = garden_context.simulator
    await garden_context.scheduler.run_once()
    await garden_context.scheduler.run_once()
    assert simulator.tick == 2


@pytest.mark.asyncio
async def test_step_runs_inside_tick_context():
    seen = []
    scheduler = TickScheduler(
        lambda: seen.append(structlog.contextvars.get_contextvars()),
        interval=1.0,
        name="garden-simulation",
    )

    await scheduler.run_once()
    await scheduler.run_once()

    assert [ctx["tick_number"] for ctx in seen] == [1, 2]
    assert all(ctx["scheduler"] == "garden-simulation" for ctx in seen)
    assert "tick_number" not in structlog.contextvars.get_contextvars()
