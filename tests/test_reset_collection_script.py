from __future__ import annotations

import importlib.util
import json
import sys
from pathlib import Path

import pytest

# Make the mockapi package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mockapi.core import config as core_config  # noqa: E402


def _load_script():
    path = ROOT / "scripts" / "reset_collection.py"
    spec = importlib.util.spec_from_file_location("reset_collection", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def script(monkeypatch):
    for var in ("MOCK_API_STORAGE", "MOCK_API_COLLECTIONS", "MOCK_API_DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
    core_config.get_settings.cache_clear()
    yield _load_script()
    core_config.get_settings.cache_clear()


def test_reset_empties_file_collection(script, tmp_path, capsys):
    (tmp_path / "mock_todos.json").write_text('{"todos": [{"id": 1}, {"id": 2}]}', encoding="utf-8")
    script.main(["--collection", "todos", "--data-dir", str(tmp_path)])
    assert json.loads((tmp_path / "mock_todos.json").read_text(encoding="utf-8")) == {"todos": []}
    assert "Records removed: 2" in capsys.readouterr().out


def test_memory_storage_flag_is_rejected(script, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        script.main(["--collection", "todos", "--storage", "memory"])
    assert excinfo.value.code == 2


def test_memory_storage_from_env_is_rejected(script, monkeypatch, capsys):
    monkeypatch.setenv("MOCK_API_STORAGE", "memory")
    core_config.get_settings.cache_clear()
    with pytest.raises(SystemExit) as excinfo:
        script.main(["--collection", "todos"])
    assert "nothing to reset" in str(excinfo.value.code)
    assert "OK" not in capsys.readouterr().out


def test_unknown_collection_is_rejected(script, tmp_path):
    with pytest.raises(SystemExit):
        script.main(["--collection", "ghosts", "--data-dir", str(tmp_path)])
    assert not (tmp_path / "mock_ghosts.json").exists()
