"""Database models for TV Italia."""

from .base import Base, SessionLocal, init_db, session_scope
from .catalog_entry import CatalogEntry
from .playback_log import PlaybackLog

__all__ = [
    "Base",
    "SessionLocal",
    "init_db",
    "session_scope",
    "CatalogEntry",
    "PlaybackLog",
]
