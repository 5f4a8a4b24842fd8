"""
Garden Metrics - the seven exported instruments.

Registered once per MetricsRegistry; the simulator only sees the handles.
"""
from dataclasses import dataclass

from src.core.metrics import MetricHandle, MetricsRegistry
from src.modules.garden import constants as c


@dataclass(frozen=True, slots=True)
class GardenMetrics:
    soil_moisture: MetricHandle
    air_temperature: MetricHandle
    light_level: MetricHandle
    tank_level: MetricHandle
    pump_on: MetricHandle
    pump_cycles: MetricHandle
    alerts: MetricHandle

    @classmethod
    def register(cls, registry: MetricsRegistry) -> "GardenMetrics":
        """Register all garden instruments. Raises DuplicateMetricError on a second call."""
        return cls(
            soil_moisture=registry.register_gauge(
                c.SOIL_MOISTURE_METRIC, "Simulated soil moisture percentage",
            ),
            air_temperature=registry.register_gauge(
                c.AIR_TEMPERATURE_METRIC, "Simulated air temperature in Celsius",
            ),
            light_level=registry.register_gauge(
                c.LIGHT_LEVEL_METRIC, "Simulated light level in lux",
            ),
            tank_level=registry.register_gauge(
                c.TANK_LEVEL_METRIC, "Simulated water tank level percentage",
            ),
            pump_on=registry.register_gauge(
                c.PUMP_ON_METRIC, "Pump running state (1 on, 0 off)",
            ),
            pump_cycles=registry.register_counter(
                c.PUMP_CYCLES_METRIC, "Total pump cycles",
            ),
            alerts=registry.register_counter(
                c.ALERTS_METRIC, "Total alert events (low tank or extreme temps)",
            ),
        )
