"""Domain entities for the IaaS platform.

Exports:
    - Server: Compute resource with its attached disks
    - Disk: Storage volume owned by a server
    - ServerStatus: Closed set of server lifecycle states
"""

from iaas_platform.domain.entities.server import Disk, Server, ServerStatus

__all__ = [
    "Disk",
    "Server",
    "ServerStatus",
]
