"""Pytest configuration and fixtures for iaas_platform tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from iaas_platform.adapters.outbound import FileServerRepository, InMemoryServerRepository
from iaas_platform.application import ServerService
from iaas_platform.infrastructure.config import Config, SecurityConfig, StorageConfig
from iaas_platform.infrastructure.container import Container
from iaas_platform.infrastructure.metrics import MetricsRegistry

TEST_API_KEY = "test-api-key"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary record directory."""
    return Config(
        storage=StorageConfig(
            data_dir=temp_dir / "servers",
            fsync=False,  # Faster for tests
        ),
        security=SecurityConfig(api_key=TEST_API_KEY),
    )


@pytest.fixture
def container() -> Container:
    """Provide a fresh DI container for each test."""
    return Container()


@pytest.fixture
def prometheus_registry() -> CollectorRegistry:
    """Provide an isolated Prometheus registry."""
    return CollectorRegistry(auto_describe=True)


@pytest.fixture
def metrics_registry(prometheus_registry: CollectorRegistry) -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    return MetricsRegistry(registry=prometheus_registry)


@pytest.fixture
def file_repository(temp_dir: Path) -> FileServerRepository:
    """Provide a file-backed repository in a temporary directory."""
    return FileServerRepository(temp_dir / "servers", fsync=False)


@pytest.fixture(params=["file", "memory"])
def repository(request: pytest.FixtureRequest, temp_dir: Path):
    """Provide each repository backend in turn."""
    if request.param == "file":
        return FileServerRepository(temp_dir / "servers", fsync=False)
    return InMemoryServerRepository()


@pytest.fixture
def service(repository, metrics_registry: MetricsRegistry) -> ServerService:
    """Provide a server service over each repository backend."""
    return ServerService(repository, metrics=metrics_registry)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
