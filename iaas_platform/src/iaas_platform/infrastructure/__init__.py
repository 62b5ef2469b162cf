"""Infrastructure layer - cross-cutting concerns."""

from iaas_platform.infrastructure.config import Config, get_config
from iaas_platform.infrastructure.logging import setup_logging, get_logger
from iaas_platform.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from iaas_platform.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
