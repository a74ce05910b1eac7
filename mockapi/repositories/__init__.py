"""
Persistence adapters.

Each backend stores one serialized document per collection (a JSON file, an
in-memory string, or a SQL row). Services depend on the StorageBackend
interface rather than touching files or sessions directly.
"""

from .base import StorageBackend
from .json_storage import JsonFileStorage
from .memory_storage import MemoryStorage

__all__ = ["StorageBackend", "JsonFileStorage", "MemoryStorage"]
