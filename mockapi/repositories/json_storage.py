"""
JSON file persistence adapter.

One file per collection, ``<data_dir>/mock_<name>.json``. Writes go to a
temporary sibling first and are moved into place with ``os.replace``, so a
save either replaces the whole file or leaves the previous one intact.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import contextlib
import os


class JsonFileStorage:
    """Filesystem-backed collection containers."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"mock_{name}.json"

    def describe(self, name: str) -> str:
        return str(self.path_for(name))

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load(self, name: str) -> Optional[str]:
        path = self.path_for(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, name: str, data: str) -> None:
        path = self.path_for(name)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(str(tmp_path), str(path))
        finally:
            # Only left behind when the write or replace failed.
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
