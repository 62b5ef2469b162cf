"""Error hierarchy for server orchestration.

Two failure kinds reach callers of the orchestration service:

- ServerNotFoundError: the requested server has no persisted record.
  Recoverable by the caller, never an internal failure.
- StorageError: reading, writing or parsing persisted state failed.
  Never retried by the core.

Entity construction cannot fail. Range and non-emptiness checks on
capacities and names are left to callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iaas_platform.domain.value_objects.identifiers import ServerId


class IaaSPlatformError(Exception):
    """Base error for the IaaS platform."""


class ServerNotFoundError(IaaSPlatformError):
    """No server is persisted under the requested ID.

    Attributes:
        server_id: The ID that was looked up
    """

    def __init__(self, server_id: "ServerId") -> None:
        self.server_id = server_id
        super().__init__(f"Server not found: {server_id}")


class StorageError(IaaSPlatformError):
    """Persisted state could not be read, written or parsed.

    The underlying exception, if any, is chained as ``__cause__``.

    Attributes:
        operation: Repository operation that failed (save, list_all, ...)
        server_id: ID of the affected server, when known
        reason: Short description of the failure
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        server_id: "ServerId | None" = None,
    ) -> None:
        self.operation = operation
        self.server_id = server_id
        self.reason = reason
        target = f" (server {server_id})" if server_id is not None else ""
        super().__init__(f"{operation} failed{target}: {reason}")
