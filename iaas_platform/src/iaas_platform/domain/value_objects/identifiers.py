"""Type-safe identifiers for servers and disks.

Identifiers are random (version 4) UUIDs. They are generated by the domain,
never supplied by clients, so uniqueness does not depend on caller input.
"""

from __future__ import annotations

import uuid
from typing import NewType
from uuid import UUID

ServerId = NewType("ServerId", UUID)
"""Unique identifier for a server. Assigned once at creation."""

DiskId = NewType("DiskId", UUID)
"""Unique identifier for a disk. Assigned at attach time."""


def new_server_id() -> ServerId:
    """Generate a fresh server ID."""
    return ServerId(uuid.uuid4())


def new_disk_id() -> DiskId:
    """Generate a fresh disk ID."""
    return DiskId(uuid.uuid4())
