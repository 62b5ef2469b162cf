"""In-memory server repository adapter.

A simple in-memory implementation of ServerRepository for testing and
development. Data is not persisted across restarts.

Usage:
    repo = InMemoryServerRepository()
    repo.save(Server.create("vm-1", 2, 4, 40))
    servers = repo.list_all()
"""

from __future__ import annotations

import copy
import threading

from iaas_platform.domain.entities import Server
from iaas_platform.domain.value_objects import ServerId


class InMemoryServerRepository:
    """In-memory implementation of the ServerRepository protocol.

    Stores deep copies, so mutating a server after save (or after loading
    it) never changes stored state. This matches the snapshot semantics of
    the file-backed repository.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._servers: dict[ServerId, Server] = {}
        self._lock = threading.Lock()

    def save(self, server: Server) -> None:
        """Store a snapshot of a server, replacing any previous one."""
        snapshot = copy.deepcopy(server)
        with self._lock:
            self._servers[server.id] = snapshot

    def list_all(self) -> list[Server]:
        """Return copies of all stored servers."""
        with self._lock:
            servers = list(self._servers.values())
        return [copy.deepcopy(s) for s in servers]

    def find_by_id(self, server_id: ServerId) -> Server | None:
        """Return a copy of one server, or None if absent."""
        with self._lock:
            server = self._servers.get(server_id)
        return copy.deepcopy(server) if server is not None else None

    def __len__(self) -> int:
        """Number of stored servers."""
        with self._lock:
            return len(self._servers)
