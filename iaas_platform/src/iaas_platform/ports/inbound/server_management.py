"""Server management port - API contract for the orchestration service.

Transport adapters (REST, CLI) translate their requests into the command
values below and call ManageServers. They never touch the repository.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol

from iaas_platform.domain.entities import Server
from iaas_platform.domain.value_objects import ServerId


@dataclass(frozen=True)
class CreateServerCommand:
    """Request to create a server."""
    name: str
    cpu: int
    ram: int
    storage: int


@dataclass(frozen=True)
class AttachDiskCommand:
    """Request to attach a new disk to an existing server."""
    server_id: ServerId
    size_gb: int


class ManageServers(Protocol):
    """Protocol for server orchestration use cases.

    Thread Safety:
        One instance is shared by all inbound requests. All methods must be
        thread-safe.
    """

    @abstractmethod
    def create_server(self, cmd: CreateServerCommand) -> Server:
        """Create and persist a new server.

        Args:
            cmd: Requested name and capacities.

        Returns:
            The persisted server (PROVISIONING, no disks).

        Raises:
            StorageError: If persisting fails. The server is then not created.
        """
        ...

    @abstractmethod
    def list_servers(self) -> list[Server]:
        """List all persisted servers.

        Raises:
            StorageError: If any record cannot be read.
        """
        ...

    @abstractmethod
    def attach_disk(self, cmd: AttachDiskCommand) -> Server:
        """Attach a new disk to a server and persist the result.

        Args:
            cmd: Target server and disk size.

        Returns:
            The updated server.

        Raises:
            ServerNotFoundError: If the server does not exist (nothing is written).
            StorageError: If reading or writing fails.
        """
        ...
