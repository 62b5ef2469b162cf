"""File-based server repository implementation.

This adapter implements the ServerRepository protocol with one JSON file
per server in a storage directory.

File Format:
    <storage_dir>/<server uuid>.json  - pretty-printed JSON snapshot:

    {
      "id": "6f1c...",
      "name": "vm-1",
      "cpu_cores": 2,
      "ram_gb": 4,
      "storage_gb": 40,
      "status": "Provisioning",
      "additional_disks": [{"id": "9a2e...", "size_gb": 100}]
    }

Atomicity:
    Records are written to a hidden temporary file in the same directory
    and renamed over the target with os.replace. Rename is the atomicity
    boundary, so readers see either the old snapshot or the new one.

Thread Safety:
    All operations are safe for concurrent use. Saves of different servers
    never interfere; saves of the same server are last-writer-wins.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from iaas_platform.domain.entities import Server
from iaas_platform.domain.errors import StorageError
from iaas_platform.domain.value_objects import ServerId
from iaas_platform.infrastructure.logging import get_logger

logger = get_logger(__name__)

RECORD_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"

_SERVER_CODEC: TypeAdapter[Server] = TypeAdapter(Server)


class FileServerRepository:
    """File-based implementation of the ServerRepository protocol.

    Attributes:
        storage_dir: Directory holding one record per server.
        fsync: Whether saves are flushed to stable storage.
    """

    def __init__(self, storage_dir: str | Path, fsync: bool = True) -> None:
        """Initialize the repository, creating the directory if needed.

        Args:
            storage_dir: Directory for server records.
            fsync: fsync each record and the directory on save.

        Raises:
            StorageError: If the directory cannot be created.
        """
        self._storage_dir = Path(storage_dir)
        self._fsync = fsync

        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("init", f"cannot create {self._storage_dir}: {exc}") from exc

    @property
    def storage_dir(self) -> Path:
        """Directory holding server records."""
        return self._storage_dir

    @property
    def fsync(self) -> bool:
        """Whether saves are flushed to stable storage."""
        return self._fsync

    def _record_path(self, server_id: ServerId) -> Path:
        """Get file path for a server record."""
        return self._storage_dir / f"{server_id}{RECORD_SUFFIX}"

    def save(self, server: Server) -> None:
        """Persist a server snapshot, replacing any previous record.

        Args:
            server: The server to persist.

        Raises:
            StorageError: If serialization or any file operation fails.
        """
        target = self._record_path(server.id)
        try:
            payload = _SERVER_CODEC.dump_json(server, indent=2)
        except PydanticSerializationError as exc:
            logger.error(
                "server_record_encode_failed",
                server_id=str(server.id),
                error=str(exc),
            )
            raise StorageError(
                "save", f"cannot encode record: {exc}", server_id=server.id
            ) from exc

        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{server.id}.",
                suffix=TEMP_SUFFIX,
                dir=self._storage_dir,
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                if self._fsync:
                    os.fsync(fh.fileno())

            os.replace(tmp_path, target)
            tmp_path = None

            if self._fsync:
                self._sync_directory()
        except OSError as exc:
            logger.error(
                "server_record_write_failed",
                server_id=str(server.id),
                path=str(target),
                error=str(exc),
            )
            raise StorageError("save", str(exc), server_id=server.id) from exc
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.debug("server_record_saved", server_id=str(server.id), path=str(target))

    def list_all(self) -> list[Server]:
        """Load every server record in the storage directory.

        Fails as a whole if any record is unreadable or corrupt; nothing
        is silently skipped.

        Returns:
            All persisted servers, ordered by file name.

        Raises:
            StorageError: If the directory or any record cannot be read.
        """
        try:
            paths = sorted(
                p for p in self._storage_dir.iterdir()
                if p.suffix == RECORD_SUFFIX and not p.name.startswith(".")
            )
        except OSError as exc:
            raise StorageError("list_all", str(exc)) from exc

        return [self._load(path, "list_all") for path in paths]

    def find_by_id(self, server_id: ServerId) -> Server | None:
        """Load one server record.

        Args:
            server_id: The server to look up.

        Returns:
            The server, or None if no record exists.

        Raises:
            StorageError: If the record exists but cannot be read or parsed.
        """
        path = self._record_path(server_id)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(
                "find_by_id", f"cannot read {path.name}: {exc}", server_id=server_id
            ) from exc
        return self._parse(content, path, "find_by_id", expected_id=server_id)

    def _load(self, path: Path, operation: str) -> Server:
        """Read and parse a single record file."""
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise StorageError(operation, f"cannot read {path.name}: {exc}") from exc
        return self._parse(content, path, operation)

    def _parse(
        self,
        content: bytes,
        path: Path,
        operation: str,
        expected_id: ServerId | None = None,
    ) -> Server:
        """Decode a record and check it belongs to its file name."""
        try:
            server = _SERVER_CODEC.validate_json(content)
        except ValidationError as exc:
            logger.error(
                "server_record_corrupt",
                path=str(path),
                errors=exc.error_count(),
            )
            raise StorageError(
                operation,
                f"corrupt record {path.name}: {exc.error_count()} validation error(s)",
                server_id=expected_id,
            ) from exc

        if str(server.id) != path.stem:
            raise StorageError(
                operation,
                f"record {path.name} holds server {server.id}",
                server_id=expected_id,
            )
        return server

    def _sync_directory(self) -> None:
        """fsync the storage directory so the rename itself is durable."""
        if os.name != "posix":
            return
        dir_fd = os.open(self._storage_dir, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)

    def __len__(self) -> int:
        """Number of stored server records."""
        return sum(
            1 for p in self._storage_dir.glob(f"*{RECORD_SUFFIX}")
            if not p.name.startswith(".")
        )
