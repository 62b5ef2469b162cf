"""Unit tests for the dependency injection container."""

from __future__ import annotations

import pytest

from iaas_platform.adapters.outbound import FileServerRepository, InMemoryServerRepository
from iaas_platform.application import ServerService
from iaas_platform.infrastructure.config import Config, StorageConfig
from iaas_platform.infrastructure.container import Container, build_container
from iaas_platform.infrastructure.metrics import MetricsRegistry
from iaas_platform.ports.outbound import ServerRepository


@pytest.mark.unit
class TestContainer:
    """Tests for the generic Container."""

    def test_singleton(self, container: Container) -> None:
        repo = InMemoryServerRepository()
        container.register_singleton(ServerRepository, repo)

        assert container.resolve(ServerRepository) is repo

    def test_factory_is_lazy_and_cached(self, container: Container) -> None:
        calls = []

        def factory(c: Container) -> InMemoryServerRepository:
            calls.append(c)
            return InMemoryServerRepository()

        container.register_factory(ServerRepository, factory)
        assert calls == []

        first = container.resolve(ServerRepository)
        second = container.resolve(ServerRepository)

        assert first is second
        assert calls == [container]

    def test_unregistered(self, container: Container) -> None:
        with pytest.raises(KeyError):
            container.resolve(ServerService)


@pytest.mark.unit
class TestBuildContainer:
    """Tests for platform wiring."""

    def test_file_backend(
        self, test_config: Config, metrics_registry: MetricsRegistry
    ) -> None:
        container = build_container(test_config, metrics=metrics_registry)

        repo = container.resolve(ServerRepository)
        service = container.resolve(ServerService)

        assert isinstance(repo, FileServerRepository)
        assert repo.storage_dir == test_config.storage.data_dir
        assert repo.fsync is False
        assert service.repository is repo
        assert container.resolve(Config) is test_config

    def test_memory_backend(self, metrics_registry: MetricsRegistry) -> None:
        config = Config(storage=StorageConfig(backend="memory"))

        container = build_container(config, metrics=metrics_registry)

        assert isinstance(container.resolve(ServerRepository), InMemoryServerRepository)
        assert container.resolve(MetricsRegistry) is metrics_registry
