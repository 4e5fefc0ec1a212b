"""Tests for the key/value stores."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from horizon.errors import StoreError
from horizon.store import JsonFileStore, MemoryStore


class TestMemoryStore:
    def test_get_missing(self) -> None:
        assert MemoryStore().get("timer") is None

    def test_set_and_get(self) -> None:
        store = MemoryStore()
        store.set("timer", "{}")
        assert store.get("timer") == "{}"

    def test_initial_data_is_copied(self) -> None:
        initial = {"a": "1"}
        store = MemoryStore(initial)
        store.set("a", "2")
        assert initial["a"] == "1"


class TestJsonFileStore:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert JsonFileStore(tmp_path / "state.json").get("timer") is None

    def test_roundtrip_keeps_other_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "state.json"
        store = JsonFileStore(path)
        store.set("settings", '{"work_minutes": 25}')
        store.set("timer", '{"phase": "work"}')
        assert path.exists()
        reopened = JsonFileStore(path)
        assert reopened.get("settings") == '{"work_minutes": 25}'
        assert reopened.get("timer") == '{"phase": "work"}'

    def test_no_temp_file_left_behind(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "state.json")
        store.set("timer", "x")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file_reads_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("not valid json{{{")
        store = JsonFileStore(path)
        assert store.get("timer") is None
        store.set("timer", "fresh")
        assert store.get("timer") == "fresh"

    def test_undecodable_file_reads_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_bytes(b'{"timer": "\xff\xfe garbage"}')
        store = JsonFileStore(path)
        assert store.get("timer") is None
        store.set("timer", "fresh")
        assert store.get("timer") == "fresh"

    def test_non_object_reads_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps(["timer"]))
        assert JsonFileStore(path).get("timer") is None

    def test_write_failure_raises_store_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFileStore(blocker / "state.json")
        with pytest.raises(StoreError):
            store.set("timer", "x")
