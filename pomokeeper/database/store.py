"""Key-value storage for small JSON documents (timer state, etc.).

Reads and writes never raise: a broken database degrades to "nothing
stored", and the failure is logged.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .models import KeyValueEntry

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "pomodoro_"


class KeyValueStore:
    """JSON values in the ``kv_entries`` table, namespaced by *prefix*."""

    def __init__(self, prefix: str = STORAGE_KEY_PREFIX) -> None:
        self._prefix = prefix

    def _full_key(self, key: str) -> str:
        return self._prefix + key

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with get_session() as db:
                entry = db.get(KeyValueEntry, self._full_key(key))
                if entry is None:
                    return default
                return json.loads(entry.value)
        except (SQLAlchemyError, ValueError) as exc:
            logger.error(f"Error reading from storage: {key}: {exc}")
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            encoded = json.dumps(value)
            with get_session() as db:
                entry = db.get(KeyValueEntry, self._full_key(key))
                if entry is None:
                    db.add(KeyValueEntry(key=self._full_key(key), value=encoded))
                else:
                    entry.value = encoded
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            logger.error(f"Error writing to storage: {key}: {exc}")
            return False
        return True

    def remove(self, key: str) -> None:
        try:
            with get_session() as db:
                entry = db.get(KeyValueEntry, self._full_key(key))
                if entry is not None:
                    db.delete(entry)
        except SQLAlchemyError as exc:
            logger.error(f"Error removing from storage: {key}: {exc}")

    def has(self, key: str) -> bool:
        try:
            with get_session() as db:
                return db.get(KeyValueEntry, self._full_key(key)) is not None
        except SQLAlchemyError as exc:
            logger.error(f"Error reading from storage: {key}: {exc}")
            return False

    def clear(self) -> None:
        """Remove every key under this store's prefix."""
        try:
            with get_session() as db:
                db.query(KeyValueEntry).filter(
                    KeyValueEntry.key.startswith(self._prefix, autoescape=True)
                ).delete(synchronize_session=False)
        except SQLAlchemyError as exc:
            logger.error(f"Error clearing storage: {exc}")


class MemoryStore:
    """Dict-backed store with the same interface, for tests and headless
    use.  Values are round-tripped through JSON like the real store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.error(f"Error writing to storage: {key}: {exc}")
            return False
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._data

    def clear(self) -> None:
        self._data.clear()
