"""
Configuration helpers for the mock API.

Exposes a Settings object that reads environment variables (listen address,
storage backend, data directory, collection registry, logging) so that
routers/services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple
import os
import re

ALL_OPERATIONS = ("list", "get", "create", "update", "delete")
STORAGE_BACKENDS = ("file", "memory", "sql")
DEFAULT_COLLECTIONS = "todos,users,items"

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class CollectionConfig:
    """A registered collection and the operations exposed for it."""

    name: str
    operations: Tuple[str, ...] = ALL_OPERATIONS

    def enabled(self, operation: str) -> bool:
        return operation in self.operations


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    api_prefix: str
    data_dir: str
    storage_backend: str
    database_url: str
    collections: Tuple[CollectionConfig, ...]
    log_level: str
    log_format: str

    @property
    def is_development(self) -> bool:
        return self.app_env == "dev"

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def parse_collections(raw: str | None) -> Tuple[CollectionConfig, ...]:
    """
    Parse ``todos,users:list|get,items`` into collection configs.

    A bare name enables every operation; ``name:op|op`` restricts the
    exposed operations.
    """
    configs: list[CollectionConfig] = []
    seen: set[str] = set()
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, ops = entry.partition(":")
        name = name.strip()
        if not _NAME_RE.match(name):
            raise ValueError(f"Invalid collection name: {name!r}")
        if name in seen:
            raise ValueError(f"Duplicate collection: {name!r}")
        seen.add(name)
        if ops.strip():
            operations = tuple(op.strip().lower() for op in ops.split("|") if op.strip())
            unknown = [op for op in operations if op not in ALL_OPERATIONS]
            if unknown:
                raise ValueError(f"Unknown operation(s) for {name!r}: {', '.join(unknown)}")
        else:
            operations = ALL_OPERATIONS
        configs.append(CollectionConfig(name=name, operations=operations))
    return tuple(configs)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    storage = (os.getenv("MOCK_API_STORAGE") or "file").strip().lower()
    if storage not in STORAGE_BACKENDS:
        raise ValueError(f"MOCK_API_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}")

    prefix = "/" + (os.getenv("MOCK_API_PREFIX") or "/api").strip().strip("/")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("MOCK_API_HOST", "localhost"),
        port=_int(os.getenv("MOCK_API_PORT", "3001"), 3001),
        api_prefix=prefix.rstrip("/"),
        data_dir=os.getenv("MOCK_API_DATA_DIR", os.path.join(os.getcwd(), "data")),
        storage_backend=storage,
        database_url=os.getenv("DATABASE_URL", ""),
        collections=parse_collections(os.getenv("MOCK_API_COLLECTIONS", DEFAULT_COLLECTIONS)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_format=(os.getenv("LOG_FORMAT") or "").lower(),
    )
