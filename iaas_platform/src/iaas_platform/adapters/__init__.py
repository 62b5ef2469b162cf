"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (REST)
- Outbound adapters: Implement external dependencies (file, memory storage)
"""

from iaas_platform.adapters.outbound import (
    FileServerRepository,
    InMemoryServerRepository,
)

__all__ = [
    # Outbound adapters
    "FileServerRepository",
    "InMemoryServerRepository",
]
