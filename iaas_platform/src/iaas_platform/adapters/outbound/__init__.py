"""Outbound adapters - implementations of outbound ports.

These adapters implement server persistence on concrete storage.
"""

from iaas_platform.adapters.outbound.file_server_repository import FileServerRepository
from iaas_platform.adapters.outbound.memory_server_repository import InMemoryServerRepository

__all__ = [
    "FileServerRepository",
    "InMemoryServerRepository",
]
