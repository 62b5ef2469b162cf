"""Prometheus metrics for the IaaS platform."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all orchestration metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Use case metrics
        self.operations_total = Counter(
            "iaas_operations_total",
            "Total orchestration operations",
            ["operation", "status"],  # status: success, not_found, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "iaas_operation_latency_seconds",
            "Orchestration operation latency in seconds",
            ["operation"],  # create_server, list_servers, attach_disk
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        # Resource metrics
        self.servers_created_total = Counter(
            "iaas_servers_created_total",
            "Total servers created",
            registry=self._registry,
        )

        self.disks_attached_total = Counter(
            "iaas_disks_attached_total",
            "Total disks attached",
            registry=self._registry,
        )

        # Storage metrics
        self.storage_errors_total = Counter(
            "iaas_storage_errors_total",
            "Total storage failures surfaced to callers",
            ["operation"],
            registry=self._registry,
        )

        # Platform info
        self.info = Info(
            "iaas_platform",
            "IaaS platform information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from iaas_platform import __version__
    _metrics.info.info({
        "version": __version__,
    })

    # Start HTTP server for Prometheus scraping
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
