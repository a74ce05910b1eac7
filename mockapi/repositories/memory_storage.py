"""In-memory persistence adapter for tests and throwaway runs."""

from __future__ import annotations

import threading
from typing import Dict, Optional


class MemoryStorage:
    """Keeps serialized documents in a dict; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._documents: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def describe(self, name: str) -> str:
        return f"memory://{name}"

    def exists(self, name: str) -> bool:
        with self._lock:
            return name in self._documents

    def load(self, name: str) -> Optional[str]:
        with self._lock:
            return self._documents.get(name)

    def save(self, name: str, data: str) -> None:
        with self._lock:
            self._documents[name] = data
