"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import KeyValueEntry, SessionRecordRow
from .store import KeyValueStore, MemoryStore
from .history import SessionHistory, MAX_HISTORY_RECORDS

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "KeyValueEntry",
    "SessionRecordRow",
    "KeyValueStore",
    "MemoryStore",
    "SessionHistory",
    "MAX_HISTORY_RECORDS",
]
