"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (ManageServers)
- Outbound ports: Dependencies on external systems (ServerRepository)

Adapters implement these ports with concrete functionality.
"""

from iaas_platform.ports.inbound import (
    AttachDiskCommand,
    CreateServerCommand,
    ManageServers,
)
from iaas_platform.ports.outbound import ServerRepository

__all__ = [
    # Inbound ports
    "AttachDiskCommand",
    "CreateServerCommand",
    "ManageServers",
    # Outbound ports
    "ServerRepository",
]
