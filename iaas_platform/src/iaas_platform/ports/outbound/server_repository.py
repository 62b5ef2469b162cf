"""Server repository port for persisting server state.

This outbound port defines the contract for server storage. Implementations
may use local files, a key-value store or SQL; the orchestration service
only ever sees this protocol.

The repository is responsible for:
- Persisting complete server snapshots (upsert by ID)
- Enumerating all persisted servers
- Looking up a single server by ID
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from iaas_platform.domain.entities import Server
from iaas_platform.domain.value_objects import ServerId


@runtime_checkable
class ServerRepository(Protocol):
    """Protocol for server persistence.

    Every operation either succeeds or raises StorageError. A missing
    server is not an error: find_by_id returns None.

    Thread Safety:
        Implementations must be safe for concurrent calls. Concurrent saves
        of the same ID are last-writer-wins; callers that read-modify-write
        must serialize per ID themselves.
    """

    @abstractmethod
    def save(self, server: Server) -> None:
        """Persist the complete current state of a server.

        Replaces any previously persisted state for the same ID. Readers
        never observe a partially written record.

        Args:
            server: The server to persist.

        Raises:
            StorageError: If the write fails.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[Server]:
        """Return every persisted server.

        Order is not guaranteed.

        Returns:
            All persisted servers.

        Raises:
            StorageError: If any record cannot be read or parsed.
        """
        ...

    @abstractmethod
    def find_by_id(self, server_id: ServerId) -> Server | None:
        """Look up a server by ID.

        Args:
            server_id: The server to look up.

        Returns:
            The persisted server, or None if no record exists.

        Raises:
            StorageError: If the record exists but cannot be read or parsed.
        """
        ...
