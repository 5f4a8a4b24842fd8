from src.core.config import settings
from src.core.metrics import MetricHandle, MetricKind, MetricsRegistry

__all__ = ["settings", "MetricHandle", "MetricKind", "MetricsRegistry"]
