"""Server and disk entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from iaas_platform.domain.value_objects.identifiers import (
    DiskId,
    ServerId,
    new_server_id,
)


class ServerStatus(Enum):
    """Server lifecycle status.

    Set to PROVISIONING at creation. No operation in this platform moves a
    server between states.
    """
    PROVISIONING = "Provisioning"
    RUNNING = "Running"
    STOPPED = "Stopped"
    TERMINATED = "Terminated"


@dataclass
class Disk:
    """Extra storage volume owned by exactly one server."""
    id: DiskId
    size_gb: int


@dataclass
class Server:
    """Provisioned compute resource."""
    id: ServerId
    name: str
    cpu_cores: int
    ram_gb: int
    storage_gb: int
    status: ServerStatus = ServerStatus.PROVISIONING
    additional_disks: list[Disk] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: str,
        cpu_cores: int,
        ram_gb: int,
        storage_gb: int,
    ) -> Server:
        """Create a new server.

        Every server starts in PROVISIONING with no additional disks,
        whatever the caller asked for. Performs no I/O.

        Args:
            name: User-supplied label (not unique).
            cpu_cores: Requested CPU cores.
            ram_gb: Requested RAM in GB.
            storage_gb: Requested root storage in GB.

        Returns:
            The new server with a fresh ID.
        """
        return cls(
            id=new_server_id(),
            name=name,
            cpu_cores=cpu_cores,
            ram_gb=ram_gb,
            storage_gb=storage_gb,
            status=ServerStatus.PROVISIONING,
            additional_disks=[],
        )

    def add_disk(self, disk: Disk) -> None:
        """Append a disk to this server.

        Args:
            disk: Disk to attach.
        """
        self.additional_disks.append(disk)
