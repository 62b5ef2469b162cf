"""Application layer for the IaaS platform.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    - ServerService: Create, list and attach-disk use cases
"""

from iaas_platform.application.server_service import ServerService

__all__ = [
    "ServerService",
]
