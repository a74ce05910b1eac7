"""SQL persistence adapter: one collection_documents row per collection."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from mockapi.db.create_tables import create_all
from mockapi.db.models import CollectionDocument
from mockapi.db.session import get_engine, get_session


class SQLStorage:
    """Stores each collection's serialized document in a single row."""

    def __init__(self, *, create_schema: bool = True) -> None:
        if create_schema:
            create_all()

    def describe(self, name: str) -> str:
        url = get_engine().url.render_as_string(hide_password=True)
        return f"{url}#collection_documents/{name}"

    def exists(self, name: str) -> bool:
        with get_session() as session:
            stmt = select(CollectionDocument.name).where(CollectionDocument.name == name).limit(1)
            return session.execute(stmt).first() is not None

    def load(self, name: str) -> Optional[str]:
        with get_session() as session:
            entity = session.get(CollectionDocument, name)
            return entity.document if entity else None

    def save(self, name: str, data: str) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(CollectionDocument, name)
            if not entity:
                session.add(CollectionDocument(name=name, document=data, updated_at=now))
            else:
                entity.document = data
                entity.updated_at = now
            try:
                session.commit()
            except Exception:
                session.rollback()
                raise
