"""
Garden Telemetry - Main Application Entry Point
Application Factory Pattern with ORJSONResponse.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from src.core.config import Settings, settings as default_settings
from src.core.exceptions import (
    GardenException,
    garden_exception_handler,
    generic_exception_handler,
    http_exception_handler,
)
from src.core.logging import configure_logging, get_logger
from src.core.metrics import (
    MetricsMiddleware,
    register_app_info,
    register_http_metrics,
    router as metrics_router,
)
from src.core.sentry import init_sentry
from src.modules.garden.context import GardenContext, init_garden_context
from src.modules.garden.router import router as garden_router

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Starts the simulation scheduler and stops it on shutdown.
    """
    context: GardenContext = app.state.garden

    logger.info("Starting Garden Telemetry", port=app.state.settings.port)
    context.scheduler.start()

    yield

    logger.info("Shutting down Garden Telemetry")
    await context.scheduler.stop()


def create_application(
    settings: Settings | None = None,
    context: GardenContext | None = None,
) -> FastAPI:
    """
    Application factory function.

    Builds the garden context (unless one is given), attaches it to
    ``app.state`` and registers routes, middleware and error handlers.
    """
    settings = settings or default_settings
    context = context or init_garden_context(settings)

    app = FastAPI(
        title="Garden Telemetry",
        summary="Synthetic irrigation telemetry for Prometheus",
        version=settings.app_version,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        default_response_class=ORJSONResponse,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.garden = context
    app.state.metrics_registry = context.registry

    init_sentry(settings)

    register_app_info(
        context.registry,
        version=settings.app_version,
        environment=settings.environment,
        prefix=settings.metrics_prefix,
    )
    app.add_middleware(
        MetricsMiddleware,
        http_metrics=register_http_metrics(context.registry, prefix=settings.metrics_prefix),
    )

    # Register exception handlers
    app.add_exception_handler(GardenException, garden_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # The display page polls the JSON snapshot from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(garden_router, prefix="/api")
    app.include_router(metrics_router)

    @app.get("/health", tags=["health"], response_class=ORJSONResponse)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "garden-telemetry"}

    @app.get("/", tags=["root"], response_class=ORJSONResponse)
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "Garden Telemetry",
            "version": settings.app_version,
            "docs": "/docs",
            "metrics": "/metrics",
            "snapshot": "/api/garden-metrics",
        }

    logger.info("Application created", routers=["garden", "metrics"])
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_application(),
        host=default_settings.host,
        port=default_settings.port,
        log_level="debug" if default_settings.debug else "info",
    )
