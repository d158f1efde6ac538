"""Registry persistence backends — JSON file and in-memory.

Backends deal in plain dicts (the on-disk record shape) and always read or
write the complete registry; there is no partial update.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from notifaya.errors.notify_errors import StorageError

if TYPE_CHECKING:
    from notifaya.config.settings import RegistryConfig


class RegistryBackend(Protocol):
    """Protocol that registry backends must implement."""

    async def load(self) -> list[dict[str, Any]]: ...

    async def save(self, records: list[dict[str, Any]]) -> None: ...


class MemoryBackend:
    """Keeps the serialized registry in process memory."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self._records: list[dict[str, Any]] = list(records or [])

    async def load(self) -> list[dict[str, Any]]:  # noqa: ASYNC910
        """Return a copy of the stored records."""
        return [dict(r) for r in self._records]

    async def save(self, records: list[dict[str, Any]]) -> None:  # noqa: ASYNC910
        """Replace the stored records."""
        self._records = [dict(r) for r in records]


class JSONFileBackend:
    """Stores the registry as a single pretty-printed JSON array.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so readers never see a half-written file.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the registry file."""
        return self._path

    async def load(self) -> list[dict[str, Any]]:
        """Read all records; a missing file is an empty registry.

        Raises:
            StorageError: If the file cannot be read or is not a JSON array.
        """
        return await asyncio.to_thread(self._read)

    async def save(self, records: list[dict[str, Any]]) -> None:
        """Atomically rewrite the whole file.

        Raises:
            StorageError: If the file cannot be written.
        """
        await asyncio.to_thread(self._write, records)

    def _read(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot read registry file {self._path}: {exc}") from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Registry file {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StorageError(f"Registry file {self._path} must contain a JSON array")
        return [r for r in data if isinstance(r, dict)]

    def _write(self, records: list[dict[str, Any]]) -> None:
        directory = self._path.parent
        tmp_name = ""
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write registry file {self._path}: {exc}") from exc


def create_backend(config: RegistryConfig) -> RegistryBackend:
    """Build the backend selected by ``config.engine``.

    Raises:
        ValueError: If the engine type is unsupported.
    """
    engine = str(config.engine).lower()
    if engine == "json":
        return JSONFileBackend(config.path)
    if engine == "memory":
        return MemoryBackend()
    msg = f"Unsupported registry engine: {engine}"
    raise ValueError(msg)
