"""Blob storage for the persisted channel catalog."""

import logging
from typing import Optional

from .models import CatalogEntry, SessionLocal, session_scope

logger = logging.getLogger(__name__)

class CatalogStore:
    """Get/set string blobs by key, backed by the ``catalog_entries`` table.

    Writes are last-write-wins: two processes sharing one database will
    overwrite each other's catalog without conflict detection.
    """

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def get(self, key: str) -> Optional[str]:
        with session_scope(self.session_factory) as session:
            entry = session.get(CatalogEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: str):
        with session_scope(self.session_factory) as session:
            entry = session.get(CatalogEntry, key)
            if entry is None:
                session.add(CatalogEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug(f"Stored {len(value)} bytes under '{key}'")
