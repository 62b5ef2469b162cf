"""Inbound ports - API contracts offered to transport adapters."""

from iaas_platform.ports.inbound.server_management import (
    AttachDiskCommand,
    CreateServerCommand,
    ManageServers,
)

__all__ = [
    "AttachDiskCommand",
    "CreateServerCommand",
    "ManageServers",
]
