"""Server orchestration service.

Coordinates the domain model and the server repository to fulfil the
create, list and attach-disk use cases. The service only knows the
ServerRepository protocol, never a concrete storage backend.

Concurrency:
    One ServerService is shared by every inbound request. Unrelated
    operations run concurrently. attach_disk is a read-modify-write, so
    calls targeting the same server are serialized by a per-ID lock held
    across fetch, append and save; without it two concurrent attaches could
    both read the same snapshot and the second save would drop the first
    disk. Locks are process-local and only exist while a call for that ID
    is in flight.

Errors:
    Repository errors propagate unchanged. Nothing is retried here.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from iaas_platform.domain.entities import Disk, Server
from iaas_platform.domain.errors import ServerNotFoundError, StorageError
from iaas_platform.domain.value_objects import ServerId, new_disk_id
from iaas_platform.infrastructure.logging import get_logger
from iaas_platform.infrastructure.metrics import MetricsRegistry, get_metrics
from iaas_platform.infrastructure.tracing import trace_span
from iaas_platform.ports.inbound import AttachDiskCommand, CreateServerCommand
from iaas_platform.ports.outbound import ServerRepository

logger = get_logger(__name__)


@dataclass
class _IdLock:
    """Mutex for one server ID plus the number of callers using it."""
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ServerService:
    """Implements the ManageServers port on top of a ServerRepository.

    Example:
        service = ServerService(FileServerRepository("./storage"))
        server = service.create_server(CreateServerCommand("vm-1", 2, 4, 40))
        server = service.attach_disk(AttachDiskCommand(server.id, 100))
    """

    def __init__(
        self,
        repository: ServerRepository,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Persistence port for servers.
            metrics: Metrics registry (defaults to the global one).
        """
        self._repository = repository
        self._metrics = metrics or get_metrics()
        self._id_locks: dict[ServerId, _IdLock] = {}
        self._id_locks_guard = threading.Lock()

    @property
    def repository(self) -> ServerRepository:
        """The persistence port this service writes through."""
        return self._repository

    def create_server(self, cmd: CreateServerCommand) -> Server:
        """Create and persist a new server.

        The ID is generated before the first save. If the save fails the
        server is considered not created.

        Args:
            cmd: Requested name and capacities.

        Returns:
            The persisted server.

        Raises:
            StorageError: If persisting fails.
        """
        server = Server.create(cmd.name, cmd.cpu, cmd.ram, cmd.storage)

        with self._instrumented("create_server", server_id=str(server.id)):
            self._repository.save(server)

        self._metrics.servers_created_total.inc()
        logger.info(
            "server_created",
            server_id=str(server.id),
            name=server.name,
            cpu_cores=server.cpu_cores,
            ram_gb=server.ram_gb,
            storage_gb=server.storage_gb,
        )
        return server

    def list_servers(self) -> list[Server]:
        """List all persisted servers.

        Raises:
            StorageError: If any record cannot be read.
        """
        with self._instrumented("list_servers"):
            servers = self._repository.list_all()

        logger.debug("servers_listed", count=len(servers))
        return servers

    def attach_disk(self, cmd: AttachDiskCommand) -> Server:
        """Attach a new disk to an existing server.

        Args:
            cmd: Target server and disk size.

        Returns:
            The updated server.

        Raises:
            ServerNotFoundError: If the server does not exist. Nothing is written.
            StorageError: If reading or writing fails.
        """
        server_id = cmd.server_id

        with self._instrumented("attach_disk", server_id=str(server_id)):
            with self._serialized(server_id):
                server = self._repository.find_by_id(server_id)
                if server is None:
                    raise ServerNotFoundError(server_id)

                disk = Disk(id=new_disk_id(), size_gb=cmd.size_gb)
                server.add_disk(disk)
                self._repository.save(server)

        self._metrics.disks_attached_total.inc()
        logger.info(
            "disk_attached",
            server_id=str(server_id),
            disk_id=str(disk.id),
            size_gb=disk.size_gb,
            disk_count=len(server.additional_disks),
        )
        return server

    @contextmanager
    def _serialized(self, server_id: ServerId) -> Iterator[None]:
        """Hold the per-ID mutation lock for the duration of the block."""
        with self._id_locks_guard:
            entry = self._id_locks.get(server_id)
            if entry is None:
                entry = self._id_locks[server_id] = _IdLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._id_locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._id_locks[server_id]

    @contextmanager
    def _instrumented(self, operation: str, **attributes: Any) -> Iterator[None]:
        """Trace, time and count one use case, logging storage failures."""
        start = time.perf_counter()
        status = "error"
        with trace_span(f"server_service.{operation}", attributes):
            try:
                yield
                status = "success"
            except ServerNotFoundError:
                status = "not_found"
                logger.info("server_not_found", operation=operation, **attributes)
                raise
            except StorageError as exc:
                self._metrics.storage_errors_total.labels(operation=operation).inc()
                logger.error(
                    "storage_error",
                    operation=operation,
                    storage_operation=exc.operation,
                    error=str(exc),
                    **attributes,
                )
                raise
            finally:
                self._metrics.operations_total.labels(
                    operation=operation, status=status
                ).inc()
                self._metrics.operation_latency_seconds.labels(
                    operation=operation
                ).observe(time.perf_counter() - start)
