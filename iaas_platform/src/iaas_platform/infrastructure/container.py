"""Dependency injection container."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from iaas_platform.infrastructure.config import Config
from iaas_platform.infrastructure.metrics import MetricsRegistry, get_metrics

T = TypeVar("T")


class Container:
    """
    Simple dependency injection container.

    Supports singleton and factory registrations with lazy initialization.
    Factories run at most once; their result is cached.
    """

    def __init__(self) -> None:
        """Initialize the container."""
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """
        Register a singleton instance.

        Args:
            interface: The interface/type to register
            instance: The singleton instance
        """
        self._instances[interface] = instance

    def register_factory(
        self,
        interface: type[T],
        factory: Callable[[Container], T],
    ) -> None:
        """
        Register a factory function for lazy instantiation.

        Args:
            interface: The interface/type to register
            factory: Factory function that takes the container and returns an instance
        """
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a dependency.

        Args:
            interface: The interface/type to resolve

        Returns:
            The resolved instance

        Raises:
            KeyError: If no registration exists for the interface
        """
        if interface in self._instances:
            return self._instances[interface]

        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance

        raise KeyError(f"No registration found for {interface}")


def build_container(
    config: Config,
    metrics: MetricsRegistry | None = None,
) -> Container:
    """Wire the platform: config, metrics, repository backend and service.

    The repository is registered under the ServerRepository port, so
    nothing downstream depends on which backend was chosen.

    Args:
        config: Platform configuration (storage.backend picks the adapter).
        metrics: Metrics registry (defaults to the global one).

    Returns:
        A container resolving ServerRepository and ServerService.
    """
    from iaas_platform.adapters.outbound import FileServerRepository, InMemoryServerRepository
    from iaas_platform.application import ServerService
    from iaas_platform.ports.outbound import ServerRepository

    container = Container()
    container.register_singleton(Config, config)
    container.register_singleton(MetricsRegistry, metrics or get_metrics())

    def make_repository(c: Container) -> ServerRepository:
        storage = c.resolve(Config).storage
        if storage.backend == "memory":
            return InMemoryServerRepository()
        return FileServerRepository(storage.data_dir, fsync=storage.fsync)

    container.register_factory(ServerRepository, make_repository)
    container.register_factory(
        ServerService,
        lambda c: ServerService(c.resolve(ServerRepository), metrics=c.resolve(MetricsRegistry)),
    )
    return container

