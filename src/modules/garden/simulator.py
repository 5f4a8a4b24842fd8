"""
Garden Environment Simulator

Tick-driven evolution of a small irrigation environment: a daylight cycle
drives light and temperature, soil moisture random-walks, and a pump waters
the soil from a tank when the soil gets dry. Every step pushes the new
readings into the metrics registry.
"""
import math
import random
from dataclasses import dataclass, fields
from typing import Callable

from src.core.exceptions import InvariantViolationError
from src.core.logging import get_logger
from src.core.metrics import MetricsRegistry
from src.modules.garden import constants as c
from src.modules.garden.metrics import GardenMetrics

logger = get_logger(__name__)

# amplitude -> value in [-amplitude, amplitude]
NoiseSource = Callable[[float], float]


class UniformNoise:
    """Uniform noise in [-amplitude, amplitude], seedable for reproducible runs."""

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    def __call__(self, amplitude: float) -> float:
        return self._rng.uniform(-amplitude, amplitude)


def zero_noise(amplitude: float) -> float:
    return 0.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]."""
    return max(low, min(high, value))


def daylight_factor(tick: int) -> float:
    """Smooth day/night factor in [0, 1]."""
    return math.sin(tick / c.DAYLIGHT_HALF_PERIOD_TICKS * math.pi) * 0.5 + 0.5


@dataclass(slots=True)
class EnvironmentState:
    soil_moisture: float = c.INITIAL_SOIL_MOISTURE
    air_temperature: float = c.INITIAL_AIR_TEMPERATURE
    light_level: float = c.INITIAL_LIGHT_LEVEL
    tank_level: float = c.INITIAL_TANK_LEVEL
    pump_on: bool = False

    RANGES = {
        "soil_moisture": c.SOIL_MOISTURE_RANGE,
        "air_temperature": c.AIR_TEMPERATURE_RANGE,
        "light_level": c.LIGHT_LEVEL_RANGE,
        "tank_level": c.TANK_LEVEL_RANGE,
    }

    def validate(self) -> None:
        """Raise InvariantViolationError if any reading is outside its range."""
        for field_name, (low, high) in self.RANGES.items():
            value = getattr(self, field_name)
            if not low <= value <= high:
                raise InvariantViolationError(field_name, value, low, high)

    def as_dict(self) -> dict[str, float | bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class EnvironmentSimulator:
    """
    Owns the environment state and the tick counter.

    ``step()`` is not re-entrant; the scheduler guarantees a single caller.
    """

    def __init__(
        self,
        registry: MetricsRegistry,
        metrics: GardenMetrics,
        noise: NoiseSource | None = None,
        state: EnvironmentState | None = None,
    ):
        self.registry = registry
        self.metrics = metrics
        self.noise = noise or UniformNoise()
        self.state = state or EnvironmentState()
        self.tick = 0

    def step(self) -> None:
        """Advance the environment by one tick and publish the readings."""
        state = self.state
        noise = self.noise

        self.tick += 1
        daylight = daylight_factor(self.tick)

        state.light_level = clamp(
            c.LIGHT_BASE + daylight * c.LIGHT_DAYLIGHT_SPAN + noise(c.LIGHT_NOISE),
            *c.LIGHT_LEVEL_RANGE,
        )
        state.air_temperature = clamp(
            c.TEMPERATURE_BASE + daylight * c.TEMPERATURE_DAYLIGHT_SPAN + noise(c.TEMPERATURE_NOISE),
            *c.AIR_TEMPERATURE_RANGE,
        )
        state.soil_moisture = clamp(
            state.soil_moisture + noise(c.SOIL_MOISTURE_NOISE),
            *c.SOIL_MOISTURE_RANGE,
        )

        # Decided on the walked moisture and the tank level before this tick draws from it
        pump_on = state.soil_moisture < c.PUMP_MOISTURE_THRESHOLD and state.tank_level > c.PUMP_MIN_TANK_LEVEL
        if pump_on:
            state.soil_moisture = clamp(state.soil_moisture + c.PUMP_MOISTURE_BOOST, *c.SOIL_MOISTURE_RANGE)
            state.tank_level = clamp(state.tank_level - c.PUMP_TANK_DRAW, *c.TANK_LEVEL_RANGE)
        else:
            state.tank_level = clamp(state.tank_level + noise(c.TANK_IDLE_NOISE), *c.TANK_LEVEL_RANGE)

        pump_started = pump_on and not state.pump_on
        if pump_on != state.pump_on:
            logger.info(
                "Pump started" if pump_on else "Pump stopped",
                tick=self.tick,
                soil_moisture=round(state.soil_moisture, 2),
                tank_level=round(state.tank_level, 2),
            )
        state.pump_on = pump_on

        alert = self._alert_reasons()
        if alert:
            logger.debug("Garden alert", tick=self.tick, reasons=alert)

        state.validate()

        with self.registry.batch():
            if pump_started:
                self.registry.increment_counter(self.metrics.pump_cycles)
            if alert:
                self.registry.increment_counter(self.metrics.alerts)

            self.registry.set_gauge(self.metrics.soil_moisture, state.soil_moisture)
            self.registry.set_gauge(self.metrics.air_temperature, state.air_temperature)
            self.registry.set_gauge(self.metrics.light_level, state.light_level)
            self.registry.set_gauge(self.metrics.tank_level, state.tank_level)
            self.registry.set_gauge(self.metrics.pump_on, 1.0 if state.pump_on else 0.0)

    def _alert_reasons(self) -> list[str]:
        reasons = []
        if self.state.tank_level < c.ALERT_TANK_BELOW:
            reasons.append("low_tank")
        if self.state.air_temperature < c.ALERT_TEMPERATURE_BELOW:
            reasons.append("cold")
        if self.state.air_temperature > c.ALERT_TEMPERATURE_ABOVE:
            reasons.append("hot")
        return reasons
