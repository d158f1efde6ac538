"""Tests for registry persistence backends."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from notifaya.config.settings import RegistryConfig, RegistryEngine
from notifaya.errors.notify_errors import StorageError
from notifaya.registry.backends import JSONFileBackend, MemoryBackend, create_backend

if TYPE_CHECKING:
    from pathlib import Path

RECORD = {"address": "ST1ABC", "email": "a@b.co", "createdAt": "2025-01-01T00:00:00Z"}


class TestMemoryBackend:
    async def test_starts_empty(self) -> None:
        assert await MemoryBackend().load() == []

    async def test_save_then_load(self) -> None:
        backend = MemoryBackend()
        await backend.save([RECORD])
        assert await backend.load() == [RECORD]

    async def test_load_returns_copies(self) -> None:
        backend = MemoryBackend([RECORD])
        loaded = await backend.load()
        loaded[0]["email"] = "changed@b.co"
        assert (await backend.load())[0]["email"] == "a@b.co"


class TestJSONFileBackend:
    async def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        backend = JSONFileBackend(tmp_path / "registrations.json")
        assert await backend.load() == []

    async def test_blank_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "registrations.json"
        path.write_text("  \n")
        assert await JSONFileBackend(path).load() == []

    async def test_save_writes_pretty_json_array(self, tmp_path: Path) -> None:
        path = tmp_path / "registrations.json"
        await JSONFileBackend(path).save([RECORD])
        text = path.read_text()
        assert json.loads(text) == [RECORD]
        assert '\n  {' in text

    async def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "registrations.json"
        await JSONFileBackend(path).save([RECORD])
        assert [p.name for p in tmp_path.iterdir()] == ["registrations.json"]

    async def test_save_creates_parent_dir(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "registrations.json"
        await JSONFileBackend(path).save([])
        assert path.exists()

    async def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "registrations.json"
        path.write_text("{not json")
        with pytest.raises(StorageError, match="not valid JSON"):
            await JSONFileBackend(path).load()

    async def test_non_array_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "registrations.json"
        path.write_text('{"address": "ST1"}')
        with pytest.raises(StorageError, match="JSON array"):
            await JSONFileBackend(path).load()

    async def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        backend = JSONFileBackend(blocker / "registrations.json")
        with pytest.raises(StorageError, match="Cannot write"):
            await backend.save([RECORD])


class TestCreateBackend:
    def test_json(self, tmp_path: Path) -> None:
        backend = create_backend(RegistryConfig(path=str(tmp_path / "r.json")))
        assert isinstance(backend, JSONFileBackend)
        assert backend.path == tmp_path / "r.json"

    def test_memory(self) -> None:
        backend = create_backend(RegistryConfig(engine=RegistryEngine.MEMORY))
        assert isinstance(backend, MemoryBackend)
