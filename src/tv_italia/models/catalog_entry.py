"""Key/value storage for the persisted channel catalog."""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from .base import Base

class CatalogEntry(Base):
    """One serialized blob stored under a key."""

    __tablename__ = "catalog_entries"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CatalogEntry(key='{self.key}', size={len(self.value or '')})>"
