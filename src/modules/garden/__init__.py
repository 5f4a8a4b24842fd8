"""
Garden Module - Simulated irrigation environment.

Simulator, scheduler and the JSON snapshot router.
"""
from src.modules.garden.context import GardenContext, init_garden_context
from src.modules.garden.router import router
from src.modules.garden.simulator import EnvironmentSimulator, EnvironmentState, UniformNoise, zero_noise

__all__ = [
    "GardenContext",
    "init_garden_context",
    "EnvironmentSimulator",
    "EnvironmentState",
    "UniformNoise",
    "zero_noise",
    "router",
]
