"""
Garden Module - API Router

Endpoints:
- GET /api/garden-metrics - JSON snapshot of the seven garden metrics
- GET /api/garden-state - raw simulator state
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.core.exceptions import ContextNotReadyError
from src.modules.garden.context import GardenContext
from src.modules.garden.schemas import EnvironmentStateOut, GardenMetricsResponse
from src.modules.garden.service import GardenService


router = APIRouter(tags=["Garden"])


def get_garden_context(request: Request) -> GardenContext:
    context = getattr(request.app.state, "garden", None)
    if context is None:
        raise ContextNotReadyError()
    return context


async def get_garden_service(
    context: Annotated[GardenContext, Depends(get_garden_context)],
) -> GardenService:
    """Garden service dependency."""
    return GardenService(context)


GardenServiceDep = Annotated[GardenService, Depends(get_garden_service)]


@router.get(
    "/garden-metrics",
    response_model=GardenMetricsResponse,
    summary="Garden metrics snapshot",
    description="""
Current value of each simulated garden instrument, in fixed order.
Process-level metrics exposed on `/metrics` are not included.

```json
{
  "updatedAt": "2026-10-18T12:00:00.000Z",
  "metrics": [
    {"name": "garden_soil_moisture_percent", "type": "gauge",
     "help": "Simulated soil moisture percentage", "value": 54.2}
  ]
}
```
    """,
)
async def garden_metrics(service: GardenServiceDep) -> GardenMetricsResponse:
    return service.get_metrics_snapshot()


@router.get(
    "/garden-state",
    response_model=EnvironmentStateOut,
    summary="Simulator state",
)
async def garden_state(service: GardenServiceDep) -> EnvironmentStateOut:
    """Raw environment state and tick counter."""
    return service.get_state()
