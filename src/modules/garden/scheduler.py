"""
Tick Scheduler

Runs a synchronous step function on a fixed interval from an asyncio task.
At most one step is in flight; when the loop falls behind, missed deadlines
are dropped rather than replayed.
"""
import asyncio
from typing import Callable

from src.core.logging import get_logger, tick_context

logger = get_logger(__name__)


class TickScheduler:
    """Fixed-interval, single-flight driver for a step callable."""

    def __init__(self, step: Callable[[], None], interval: float, name: str = "garden-simulation"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._step = step
        self.interval = interval
        self.name = name
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self.ticks_run = 0
        self.ticks_skipped = 0
        self.ticks_failed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop on the running event loop. Idempotent."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info("Scheduler started", scheduler=self.name, interval=self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(
            "Scheduler stopped",
            scheduler=self.name,
            ticks_run=self.ticks_run,
            ticks_skipped=self.ticks_skipped,
            ticks_failed=self.ticks_failed,
        )

    async def run_once(self) -> bool:
        """
        Run one step unless another is in flight.

        Returns False when the tick was skipped because a step was running.
        """
        if self._lock.locked():
            self.ticks_skipped += 1
            logger.warning("Tick skipped, previous step still running", scheduler=self.name)
            return False

        async with self._lock:
            with tick_context(self.name, self.ticks_run + self.ticks_failed + 1):
                try:
                    self._step()
                    self.ticks_run += 1
                except Exception:
                    self.ticks_failed += 1
                    logger.exception("Simulation step failed")
        return True

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.interval

        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            await self.run_once()

            deadline += self.interval
            now = loop.time()
            if deadline < now:
                missed = int((now - deadline) // self.interval) + 1
                deadline += missed * self.interval
                self.ticks_skipped += missed
                logger.warning("Scheduler fell behind", scheduler=self.name, missed_ticks=missed)
