"""
Pytest Configuration and Fixtures.

Shared fixtures: isolated metrics registries, zero-noise garden contexts and
an ASGI client bound to a fresh application per test.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.core.metrics import MetricsRegistry
from src.main import create_application
from src.modules.garden.context import GardenContext, init_garden_context
from src.modules.garden.metrics import GardenMetrics
from src.modules.garden.simulator import EnvironmentSimulator, EnvironmentState, zero_noise


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="testing", simulation_tick_seconds=0.01, sentry_dsn="")


@pytest.fixture
def registry() -> MetricsRegistry:
    """Registry without process collectors, so renders are deterministic."""
    return MetricsRegistry(process_metrics=False)


@pytest.fixture
def garden_metrics(registry) -> GardenMetrics:
    return GardenMetrics.register(registry)


@pytest.fixture
def make_simulator(registry, garden_metrics):
    """Build a simulator over the shared registry with a given state and noise."""

    def _make(noise=zero_noise, **state_fields) -> EnvironmentSimulator:
        return EnvironmentSimulator(
            registry,
            garden_metrics,
            noise=noise,
            state=EnvironmentState(**state_fields),
        )

    return _make


@pytest.fixture
def garden_context(test_settings) -> GardenContext:
    return init_garden_context(test_settings, noise=zero_noise)


@pytest.fixture
def app(test_settings, garden_context):
    return create_application(settings=test_settings, context=garden_context)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


class ScriptedNoise:
    """Noise source returning ``factor * amplitude`` and recording every call."""

    def __init__(self, factor: float = 0.0):
        self.factor = factor
        self.calls: list[float] = []

    def __call__(self, amplitude: float) -> float:
        self.calls.append(amplitude)
        return self.factor * amplitude


@pytest.fixture
def scripted_noise():
    return ScriptedNoise
