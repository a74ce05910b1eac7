"""SQLAlchemy model mirroring the per-collection JSON files."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from .session import Base


class CollectionDocument(Base):
    __tablename__ = "collection_documents"

    name = Column(String(128), primary_key=True)
    document = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
