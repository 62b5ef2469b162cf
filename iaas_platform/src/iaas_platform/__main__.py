"""Entry point: compose the platform and serve the REST API.

Usage:
    python -m iaas_platform
    IAAS_PLATFORM_STORAGE__DATA_DIR=/var/lib/iaas iaas-platform
"""

from __future__ import annotations

from iaas_platform import __version__
from iaas_platform.adapters.inbound import run_server
from iaas_platform.application import ServerService
from iaas_platform.infrastructure.config import get_config
from iaas_platform.infrastructure.container import build_container
from iaas_platform.infrastructure.logging import get_logger, setup_logging
from iaas_platform.infrastructure.metrics import get_metrics, setup_metrics
from iaas_platform.infrastructure.tracing import setup_tracing


def main() -> None:
    """Start the IaaS platform API."""
    config = get_config()

    setup_logging(config.observability.log_level, config.observability.log_format)
    setup_tracing(
        service_name=config.observability.otel_service_name,
        otlp_endpoint=config.observability.otel_endpoint,
    )
    if config.server.metrics_enabled:
        metrics = setup_metrics(config.server.metrics_port)
    else:
        metrics = get_metrics()

    container = build_container(config, metrics=metrics)
    service = container.resolve(ServerService)

    get_logger(__name__).info(
        "iaas_platform_starting",
        version=__version__,
        backend=config.storage.backend,
        data_dir=str(config.storage.data_dir),
    )
    run_server(service, config)


if __name__ == "__main__":
    main()
