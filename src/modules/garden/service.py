"""
Garden Module - Read Service
Turns registry snapshots and simulator state into response schemas.
"""
from datetime import datetime

from src.modules.garden.constants import GARDEN_METRIC_NAMES
from src.modules.garden.context import GardenContext
from src.modules.garden.schemas import EnvironmentStateOut, GardenMetricOut, GardenMetricsResponse


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a Z suffix."""
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class GardenService:
    """Read-only queries over the garden context."""

    def __init__(self, context: GardenContext):
        self.context = context

    def get_metrics_snapshot(self) -> GardenMetricsResponse:
        snapshot = self.context.registry.snapshot(GARDEN_METRIC_NAMES)
        return GardenMetricsResponse(
            updated_at=format_timestamp(snapshot.updated_at),
            metrics=[
                GardenMetricOut(
                    name=sample.name,
                    type=sample.kind.value,
                    help=sample.help,
                    value=sample.value,
                )
                for sample in snapshot.metrics
            ],
        )

    def get_state(self) -> EnvironmentStateOut:
        simulator = self.context.simulator
        return EnvironmentStateOut(tick=simulator.tick, **simulator.state.as_dict())
