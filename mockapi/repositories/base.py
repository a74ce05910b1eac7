"""Storage backend interface shared by every persistence adapter."""

from __future__ import annotations

from typing import Optional, Protocol


class StorageBackend(Protocol):
    """
    Durable container per collection name.

    ``load`` returns the raw document text, or None when the container does
    not exist. ``save`` replaces the whole container and raises the
    backend's native error (OSError, SQLAlchemyError, ...) on failure.
    """

    def load(self, name: str) -> Optional[str]:
        ...

    def save(self, name: str, data: str) -> None:
        ...

    def exists(self, name: str) -> bool:
        ...

    def describe(self, name: str) -> str:
        """Human readable location of the container, used in log lines."""
        ...
