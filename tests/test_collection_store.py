"""
CollectionStore against the filesystem and in-memory backends.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from structlog.testing import capture_logs

# Make the mockapi package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mockapi.repositories import JsonFileStorage, MemoryStorage  # noqa: E402
from mockapi.services.collection_store import (  # noqa: E402
    Collection,
    CollectionStore,
    StorageWriteFailure,
)


class _ReadOnlyBackend(MemoryStorage):
    def save(self, name: str, data: str) -> None:
        raise PermissionError(13, "Permission denied")


class _BrokenReadBackend(MemoryStorage):
    def load(self, name: str):
        raise OSError(5, "Input/output error")


@pytest.fixture()
def file_store(tmp_path):
    return CollectionStore(JsonFileStorage(tmp_path))


def test_missing_container_loads_empty(file_store):
    collection = file_store.load("todos")
    assert collection.name == "todos"
    assert collection.records == []


def test_save_writes_named_document(file_store, tmp_path):
    file_store.save("todos", Collection("todos", [{"id": 1, "title": "café"}]))
    path = tmp_path / "mock_todos.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"todos": [{"id": 1, "title": "café"}]}
    # indented, non-ASCII kept
    assert "\n  \"todos\"" in path.read_text(encoding="utf-8")
    assert "café" in path.read_text(encoding="utf-8")
    assert not (tmp_path / "mock_todos.json.tmp").exists()


def test_load_round_trips_saved_records(file_store):
    records = [{"id": 1, "a": [1, 2]}, {"id": 2, "b": {"c": None}}]
    file_store.save("items", Collection("items", records))
    assert file_store.load("items").records == records


@pytest.mark.parametrize(
    "content",
    ["{not json", "[]", '{"other": []}', '{"todos": {"id": 1}}', '"todos"', ""],
)
def test_corrupt_or_misshapen_container_fails_open(file_store, tmp_path, content):
    (tmp_path / "mock_todos.json").write_text(content, encoding="utf-8")
    assert file_store.load("todos").records == []
    # the corrupt file is not rewritten by a load
    assert (tmp_path / "mock_todos.json").read_text(encoding="utf-8") == content


def test_read_error_fails_open():
    store = CollectionStore(_BrokenReadBackend({"todos": '{"todos": [{"id": 1}]}'}))
    assert store.load("todos").records == []


def test_write_failure_is_raised():
    store = CollectionStore(_ReadOnlyBackend())
    with pytest.raises(StorageWriteFailure) as excinfo:
        store.save("todos", Collection("todos", [{"id": 1}]))
    assert excinfo.value.collection == "todos"
    assert "Permission denied" in excinfo.value.reason


def test_ensure_creates_only_missing_containers(file_store, tmp_path):
    assert file_store.ensure("users") is True
    assert json.loads((tmp_path / "mock_users.json").read_text(encoding="utf-8")) == {"users": []}

    (tmp_path / "mock_items.json").write_text("garbage", encoding="utf-8")
    assert file_store.ensure("items") is False
    assert (tmp_path / "mock_items.json").read_text(encoding="utf-8") == "garbage"
    assert file_store.ensure("users") is False


def test_ensure_creates_data_dir(tmp_path):
    store = CollectionStore(JsonFileStorage(tmp_path / "nested" / "data"))
    assert store.ensure("todos") is True
    assert (tmp_path / "nested" / "data" / "mock_todos.json").exists()


def test_memory_backend_keeps_serialized_copies():
    store = CollectionStore(MemoryStorage())
    collection = Collection("todos", [{"id": 1}])
    store.save("todos", collection)
    collection.records.append({"id": 2})
    assert store.load("todos").records == [{"id": 1}]


def test_load_failure_is_logged(file_store, tmp_path):
    (tmp_path / "mock_todos.json").write_text("{oops", encoding="utf-8")
    with capture_logs() as logs:
        file_store.load("todos")
    events = [entry for entry in logs if entry["event"] == "collection_load_failed"]
    assert len(events) == 1
    assert events[0]["log_level"] == "warning"
    assert events[0]["collection"] == "todos"
    assert "invalid JSON" in events[0]["reason"]
    assert events[0]["logger"] == "mockapi.services.collection_store"


def test_non_utf8_container_fails_open(file_store, tmp_path):
    raw = b'{"todos": [\xff\xfe]}'
    (tmp_path / "mock_todos.json").write_bytes(raw)
    with capture_logs() as logs:
        assert file_store.load("todos").records == []
    assert [e["event"] for e in logs] == ["collection_load_failed"]
    assert (tmp_path / "mock_todos.json").read_bytes() == raw


def test_unencodable_text_is_a_write_failure_without_leftovers(file_store, tmp_path):
    file_store.save("todos", Collection("todos", [{"id": 1}]))
    before = (tmp_path / "mock_todos.json").read_bytes()

    with pytest.raises(StorageWriteFailure):
        file_store.save("todos", Collection("todos", [{"id": 2, "t": "\ud800"}]))

    assert not (tmp_path / "mock_todos.json.tmp").exists()
    assert (tmp_path / "mock_todos.json").read_bytes() == before
