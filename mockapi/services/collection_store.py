"""
Collection persistence: load/save a whole collection as one document.

Loads fail open (missing or unreadable containers become an empty
collection), saves fail loudly with StorageWriteFailure.
"""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from sqlalchemy.exc import SQLAlchemyError

from mockapi.core.logging import get_logger
from mockapi.repositories.base import StorageBackend

logger = get_logger(__name__)

Record = Dict[str, Any]


class StoreError(Exception):
    """Base class for collection persistence errors."""


class StorageWriteFailure(StoreError):
    """Raised when the storage medium rejects a save."""

    def __init__(self, collection: str, reason: str):
        super().__init__(f"Could not write collection {collection!r}: {reason}")
        self.collection = collection
        self.reason = reason


@dataclass
class Collection:
    name: str
    records: List[Record] = field(default_factory=list)

    def to_document(self) -> Dict[str, List[Record]]:
        return {self.name: self.records}


class CollectionStore:
    """Reads and writes collections through a StorageBackend.

    Also owns the per-collection locks that serialize the
    load -> compute -> save cycle of record operations.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        with self._registry_lock:
            collection_lock = self._locks.setdefault(name, threading.Lock())
        with collection_lock:
            yield

    def load(self, name: str) -> Collection:
        try:
            raw = self.backend.load(name)
        except (OSError, ValueError, SQLAlchemyError) as exc:
            self._log_load_failure(name, f"read error: {exc}")
            return Collection(name=name)

        if raw is None:
            logger.debug("collection_absent", collection=name, location=self.backend.describe(name))
            return Collection(name=name)

        try:
            document = json.loads(raw)
        except ValueError as exc:
            self._log_load_failure(name, f"invalid JSON: {exc}")
            return Collection(name=name)

        records = document.get(name) if isinstance(document, dict) else None
        if not isinstance(records, list):
            self._log_load_failure(name, f"expected an object with a {name!r} array")
            return Collection(name=name)
        return Collection(name=name, records=records)

    def save(self, name: str, collection: Collection) -> None:
        data = json.dumps(collection.to_document(), ensure_ascii=False, indent=2)
        try:
            self.backend.save(name, data)
        except (OSError, ValueError, SQLAlchemyError) as exc:
            logger.error(
                "collection_save_failed",
                collection=name,
                location=self.backend.describe(name),
                error=str(exc),
            )
            raise StorageWriteFailure(name, str(exc)) from exc
        logger.debug("collection_saved", collection=name, records=len(collection.records))

    def ensure(self, name: str) -> bool:
        """Create an empty container for ``name`` if none exists yet."""
        with self.lock(name):
            if self.backend.exists(name):
                return False
            self.save(name, Collection(name=name))
        logger.info("collection_initialized", collection=name, location=self.backend.describe(name))
        return True

    def _log_load_failure(self, name: str, reason: str) -> None:
        logger.warning(
            "collection_load_failed",
            collection=name,
            location=self.backend.describe(name),
            reason=reason,
        )
