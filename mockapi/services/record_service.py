"""
Record CRUD use cases on top of CollectionStore.

Every operation performs exactly one load, a local computation and at most
one save while holding the collection lock, so concurrent requests against
the same collection cannot interleave their read-modify-write cycles.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from mockapi.core.logging import get_logger
from mockapi.services.collection_store import Collection, CollectionStore, Record

logger = get_logger(__name__)

RESERVED_FIELDS = ("id", "createdAt")

_ID_RE = re.compile(r"^[+-]?\d+$")


class RecordError(Exception):
    """Base class for record-level errors."""


class RecordNotFound(RecordError):
    def __init__(self, collection: str, record_id: Any):
        super().__init__(f"Record {record_id!r} not found in {collection!r}")
        self.collection = collection
        self.record_id = record_id


class MalformedIdentifier(RecordNotFound):
    """Requested id is not an integer; reported exactly like a missing record."""


def utc_timestamp() -> str:
    """Current UTC time as ``2024-05-01T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_record_id(value: Union[int, str, None]) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = (value or "").strip() if isinstance(value, str) else ""
    if not _ID_RE.match(text):
        return None
    return int(text)


def _is_int_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def next_record_id(records: List[Record]) -> int:
    """max(existing integer ids) + 1, or 1 for an empty collection."""
    ids = [r.get("id") for r in records if isinstance(r, dict) and _is_int_id(r.get("id"))]
    return max(ids) + 1 if ids else 1


def _find_index(records: List[Record], record_id: int) -> int:
    for index, record in enumerate(records):
        if isinstance(record, dict) and _is_int_id(record.get("id")) and record["id"] == record_id:
            return index
    return -1


@dataclass
class RecordService:
    """List/get/create/update/delete for any collection held by ``store``."""

    store: CollectionStore
    clock: Callable[[], str] = utc_timestamp

    def _require_id(self, name: str, raw_id: Union[int, str]) -> int:
        record_id = parse_record_id(raw_id)
        if record_id is None:
            raise MalformedIdentifier(name, raw_id)
        return record_id

    def list_all(self, name: str) -> List[Record]:
        with self.store.lock(name):
            return self.store.load(name).records

    def get_by_id(self, name: str, raw_id: Union[int, str]) -> Record:
        record_id = self._require_id(name, raw_id)
        with self.store.lock(name):
            records = self.store.load(name).records
        index = _find_index(records, record_id)
        if index == -1:
            raise RecordNotFound(name, record_id)
        return records[index]

    def create(self, name: str, payload: Mapping[str, Any]) -> Record:
        with self.store.lock(name):
            collection = self.store.load(name)
            record: Record = {
                "id": next_record_id(collection.records),
                "createdAt": self.clock(),
            }
            # Reserved fields are computed here; payload copies are ignored.
            record.update({k: v for k, v in payload.items() if k not in RESERVED_FIELDS})
            collection.records.append(record)
            self.store.save(name, collection)
        logger.info("record_created", collection=name, record_id=record["id"])
        return record

    def update(self, name: str, raw_id: Union[int, str], payload: Mapping[str, Any]) -> Record:
        record_id = self._require_id(name, raw_id)
        with self.store.lock(name):
            collection = self.store.load(name)
            index = _find_index(collection.records, record_id)
            if index == -1:
                raise RecordNotFound(name, record_id)
            existing = collection.records[index]
            merged: Record = {**existing, **payload, "id": record_id}
            if "createdAt" in existing:
                merged["createdAt"] = existing["createdAt"]
            else:
                merged.pop("createdAt", None)
            collection.records[index] = merged
            self.store.save(name, collection)
        logger.info("record_updated", collection=name, record_id=record_id)
        return merged

    def delete(self, name: str, raw_id: Union[int, str]) -> None:
        record_id = self._require_id(name, raw_id)
        with self.store.lock(name):
            collection = self.store.load(name)
            index = _find_index(collection.records, record_id)
            if index == -1:
                raise RecordNotFound(name, record_id)
            del collection.records[index]
            self.store.save(name, collection)
        logger.info("record_deleted", collection=name, record_id=record_id)

    def reset(self, name: str) -> int:
        """Empty a collection, returning how many records were dropped."""
        with self.store.lock(name):
            dropped = len(self.store.load(name).records)
            self.store.save(name, Collection(name=name))
        logger.info("collection_reset", collection=name, dropped=dropped)
        return dropped
