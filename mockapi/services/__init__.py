"""
High-level use cases for the mock API.

CollectionStore owns persistence of whole collections; RecordService
implements the record CRUD rules on top of it. Routers call these services
instead of touching storage backends directly.
"""

from .collection_store import Collection, CollectionStore, StorageWriteFailure, StoreError
from .record_service import MalformedIdentifier, RecordError, RecordNotFound, RecordService

__all__ = [
    "Collection",
    "CollectionStore",
    "MalformedIdentifier",
    "RecordError",
    "RecordNotFound",
    "RecordService",
    "StorageWriteFailure",
    "StoreError",
]
