"""Garden Schemas."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GardenMetricOut(BaseModel):
    """One allow-listed instrument and its current value."""
    name: str = Field(..., description="Prometheus metric name")
    type: Literal["gauge", "counter"] = Field(..., description="Instrument kind")
    help: str = Field(..., description="Metric help text")
    value: float | None = Field(None, description="Current value, null if never set")


class GardenMetricsResponse(BaseModel):
    """
    Garden metrics snapshot.

    Returned by GET /api/garden-metrics.
    """
    model_config = ConfigDict(populate_by_name=True)

    updated_at: str = Field(..., alias="updatedAt", description="ISO-8601 UTC time of the snapshot")
    metrics: list[GardenMetricOut] = Field(default_factory=list)


class EnvironmentStateOut(BaseModel):
    """Raw simulator state, for debugging."""
    tick: int
    soil_moisture: float
    air_temperature: float
    light_level: float
    tank_level: float
    pump_on: bool
