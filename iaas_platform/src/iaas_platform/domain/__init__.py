"""Domain layer - entities, value objects and errors."""

from iaas_platform.domain.entities import Disk, Server, ServerStatus
from iaas_platform.domain.errors import (
    IaaSPlatformError,
    ServerNotFoundError,
    StorageError,
)
from iaas_platform.domain.value_objects import DiskId, ServerId

__all__ = [
    "Disk",
    "Server",
    "ServerStatus",
    "DiskId",
    "ServerId",
    "IaaSPlatformError",
    "ServerNotFoundError",
    "StorageError",
]
