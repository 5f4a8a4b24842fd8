"""
Prometheus Metrics - Registry and Exposition

Every instrument lives in a dedicated CollectorRegistry owned by a
MetricsRegistry instance, never in the prometheus_client global REGISTRY.
Exposes the registry at /metrics for Prometheus scraping.
"""
import math
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Iterator

from fastapi import APIRouter, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Gauge,
    Histogram,
    Info,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

from src.core.exceptions import (
    ConfigurationError,
    ContextNotReadyError,
    DuplicateMetricError,
    InvalidMetricValueError,
    UnknownMetricError,
)
from src.core.logging import get_logger

logger = get_logger(__name__)


class MetricKind(str, Enum):
    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass(frozen=True, slots=True)
class MetricHandle:
    """Opaque reference returned by registration; pass it back to write."""

    name: str
    kind: MetricKind


@dataclass(slots=True)
class MetricInstrument:
    name: str
    kind: MetricKind
    help: str
    collector: Gauge | Counter
    value: float | None = None


@dataclass(frozen=True, slots=True)
class MetricSample:
    name: str
    kind: MetricKind
    help: str
    value: float | None


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    updated_at: datetime
    metrics: tuple[MetricSample, ...]


class MetricsRegistry:
    """
    Named gauges and counters backed by a prometheus_client CollectorRegistry.

    Writes and snapshot reads share one re-entrant lock, so a writer can
    group several updates with ``batch()`` and a snapshot never observes
    only part of them. Instruments are never removed.
    """

    def __init__(self, prefix: str = "garden", process_metrics: bool = True):
        self._registry = CollectorRegistry(auto_describe=True)
        self._instruments: dict[str, MetricInstrument] = {}
        self._lock = threading.RLock()

        if process_metrics:
            ProcessCollector(namespace=prefix, registry=self._registry)
            PlatformCollector(registry=self._registry)
            GCCollector(registry=self._registry)

    @property
    def collector_registry(self) -> CollectorRegistry:
        """Underlying registry, for auxiliary collectors (HTTP, app info)."""
        return self._registry

    @property
    def names(self) -> list[str]:
        """Registered instrument names in registration order."""
        with self._lock:
            return list(self._instruments)

    # === Registration ===

    def register_gauge(self, name: str, help: str) -> MetricHandle:
        return self._register(name, help, MetricKind.GAUGE)

    def register_counter(self, name: str, help: str) -> MetricHandle:
        return self._register(name, help, MetricKind.COUNTER)

    def _register(self, name: str, help: str, kind: MetricKind) -> MetricHandle:
        with self._lock:
            if name in self._instruments:
                raise DuplicateMetricError(name)

            if kind is MetricKind.GAUGE:
                collector: Gauge | Counter = Gauge(name, help, registry=self._registry)
                initial = None
            else:
                # prometheus_client strips a trailing _total and re-adds it on exposition
                collector = Counter(name, help, registry=self._registry)
                initial = 0.0

            self._instruments[name] = MetricInstrument(
                name=name, kind=kind, help=help, collector=collector, value=initial,
            )

        logger.debug("Metric registered", name=name, kind=kind.value)
        return MetricHandle(name=name, kind=kind)

    # === Writes ===

    def set_gauge(self, handle: MetricHandle, value: float) -> None:
        instrument = self._resolve(handle, MetricKind.GAUGE)
        value = float(value)
        if not math.isfinite(value):
            raise InvalidMetricValueError(handle.name, value, "gauge value must be finite")

        with self._lock:
            instrument.collector.set(value)
            instrument.value = value

    def increment_counter(self, handle: MetricHandle, delta: float = 1.0) -> None:
        instrument = self._resolve(handle, MetricKind.COUNTER)
        delta = float(delta)
        if not math.isfinite(delta) or delta < 0:
            raise InvalidMetricValueError(handle.name, delta, "counter delta must be finite and non-negative")

        with self._lock:
            instrument.collector.inc(delta)
            instrument.value = (instrument.value or 0.0) + delta

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Hold the registry lock across several writes."""
        with self._lock:
            yield

    def _resolve(self, handle: MetricHandle, kind: MetricKind) -> MetricInstrument:
        instrument = self._instruments.get(handle.name)
        if instrument is None:
            raise UnknownMetricError(handle.name)
        if instrument.kind is not kind:
            raise ConfigurationError(
                f"Metric '{handle.name}' is a {instrument.kind.value}, not a {kind.value}",
                details={"name": handle.name},
            )
        return instrument

    # === Reads ===

    def get_value(self, name: str) -> float | None:
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                raise UnknownMetricError(name)
            return instrument.value

    def render_exposition(self) -> bytes:
        """Prometheus text format for every collector in the registry."""
        with self._lock:
            return generate_latest(self._registry)

    def snapshot(self, names: Iterable[str]) -> RegistrySnapshot:
        """
        Current values for the requested names, in registration order.

        Names outside the registry raise UnknownMetricError; instruments not
        requested (including process-level collectors) are left out.
        """
        wanted = set(names)
        with self._lock:
            missing = wanted.difference(self._instruments)
            if missing:
                raise UnknownMetricError(sorted(missing)[0])

            samples = tuple(
                MetricSample(
                    name=instrument.name,
                    kind=instrument.kind,
                    help=instrument.help,
                    value=instrument.value,
                )
                for instrument in self._instruments.values()
                if instrument.name in wanted
            )
            return RegistrySnapshot(updated_at=datetime.now(timezone.utc), metrics=samples)


# === Auxiliary collectors ===

@dataclass(frozen=True, slots=True)
class HttpMetrics:
    requests: Counter
    latency: Histogram


def register_http_metrics(registry: MetricsRegistry, prefix: str = "garden") -> HttpMetrics:
    """Request count and latency, recorded by MetricsMiddleware."""
    return HttpMetrics(
        requests=Counter(
            f"{prefix}_http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=registry.collector_registry,
        ),
        latency=Histogram(
            f"{prefix}_http_request_duration_seconds",
            "HTTP request latency",
            ["method", "endpoint"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0],
            registry=registry.collector_registry,
        ),
    )


def register_app_info(registry: MetricsRegistry, version: str, environment: str, prefix: str = "garden") -> None:
    info = Info(f"{prefix}_app", "Garden telemetry application info", registry=registry.collector_registry)
    info.info({"version": version, "environment": environment})


UNMATCHED_ENDPOINT = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect request metrics."""

    def __init__(self, app, http_metrics: HttpMetrics):
        super().__init__(app)
        self.http_metrics = http_metrics

    async def dispatch(self, request: Request, call_next) -> StarletteResponse:
        # Skip metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # Route template, or one shared label for 404s; raw paths are unbounded
        route = request.scope.get("route")
        endpoint = getattr(route, "path", UNMATCHED_ENDPOINT)

        self.http_metrics.requests.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        self.http_metrics.latency.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)

        return response


# === Metrics Router ===
router = APIRouter(tags=["Health"])


def get_metrics_registry(request: Request) -> MetricsRegistry:
    registry = getattr(request.app.state, "metrics_registry", None)
    if registry is None:
        raise ContextNotReadyError()
    return registry


@router.get("/metrics", include_in_schema=False)
async def metrics(request: Request):
    """
    Prometheus metrics endpoint.

    Scrape this endpoint with Prometheus:
    ```yaml
    scrape_configs:
      - job_name: 'garden-telemetry'
        static_configs:
          - targets: ['localhost:8080']
        metrics_path: '/metrics'
    ```
    """
    registry = get_metrics_registry(request)
    return Response(
        content=registry.render_exposition(),
        media_type=CONTENT_TYPE_LATEST,
    )
