"""Domain value objects for the IaaS platform."""

from iaas_platform.domain.value_objects.identifiers import (
    DiskId,
    ServerId,
    new_disk_id,
    new_server_id,
)

__all__ = [
    "DiskId",
    "ServerId",
    "new_disk_id",
    "new_server_id",
]
