"""
Collection persistence through the SQL backend on a temporary SQLite database.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make the mockapi package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mockapi.db import models  # noqa: E402
from mockapi.db import session as db_session  # noqa: E402
from mockapi.core import config as core_config  # noqa: E402
from mockapi.repositories.sql_storage import SQLStorage  # noqa: E402
from mockapi.services.collection_store import CollectionStore  # noqa: E402
from mockapi.services.record_service import RecordNotFound, RecordService  # noqa: E402


@pytest.fixture()
def sql_backend(tmp_path, monkeypatch):
    """Temporary SQLite database; caches are cleared so DATABASE_URL is re-read."""
    db_file = tmp_path / "mock.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    backend = SQLStorage()

    yield backend

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_backend_save_and_load(sql_backend):
    assert sql_backend.load("todos") is None
    assert not sql_backend.exists("todos")
    sql_backend.save("todos", '{"todos": []}')
    sql_backend.save("todos", '{"todos": [{"id": 1}]}')
    assert sql_backend.exists("todos")
    assert json.loads(sql_backend.load("todos")) == {"todos": [{"id": 1}]}
    assert sql_backend.describe("todos").endswith("#collection_documents/todos")


def test_record_flow_on_sql(sql_backend):
    store = CollectionStore(sql_backend)
    assert store.ensure("todos") is True
    svc = RecordService(store)
    svc.create("todos", {"title": "a"})
    svc.create("todos", {"title": "b"})
    svc.delete("todos", 2)
    assert svc.create("todos", {"title": "c"})["id"] == 2
    assert [r["title"] for r in svc.list_all("todos")] == ["a", "c"]

    before = sql_backend.load("todos")
    with pytest.raises(RecordNotFound):
        svc.update("todos", 10, {"title": "zzz"})
    assert sql_backend.load("todos") == before


def test_corrupt_row_fails_open(sql_backend):
    sql_backend.save("users", "{broken")
    assert CollectionStore(sql_backend).load("users").records == []
