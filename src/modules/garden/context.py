"""
Garden Context

Everything the simulation and the read paths share, built once at process
start by ``init_garden_context()`` and kept on ``app.state``.
"""
from dataclasses import dataclass

from src.core.config import Settings
from src.core.logging import get_logger
from src.core.metrics import MetricsRegistry
from src.modules.garden.metrics import GardenMetrics
from src.modules.garden.scheduler import TickScheduler
from src.modules.garden.simulator import EnvironmentSimulator, EnvironmentState, NoiseSource

logger = get_logger(__name__)


@dataclass(slots=True)
class GardenContext:
    registry: MetricsRegistry
    metrics: GardenMetrics
    simulator: EnvironmentSimulator
    scheduler: TickScheduler


def init_garden_context(
    settings: Settings,
    noise: NoiseSource | None = None,
    state: EnvironmentState | None = None,
    registry: MetricsRegistry | None = None,
) -> GardenContext:
    """
    Create the registry, register the garden instruments and wire the
    simulator to a scheduler. The scheduler is not started here.
    """
    registry = registry or MetricsRegistry(
        prefix=settings.metrics_prefix,
        process_metrics=settings.process_metrics_enabled,
    )
    metrics = GardenMetrics.register(registry)
    simulator = EnvironmentSimulator(registry, metrics, noise=noise, state=state)
    scheduler = TickScheduler(simulator.step, interval=settings.simulation_tick_seconds)

    logger.info(
        "Garden context initialised",
        tick_seconds=settings.simulation_tick_seconds,
        process_metrics=settings.process_metrics_enabled,
        instruments=registry.names,
    )
    return GardenContext(registry=registry, metrics=metrics, simulator=simulator, scheduler=scheduler)
