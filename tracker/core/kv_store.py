"""Flat key-value persistence for the tracker collections.

Every collection is one JSON blob under a namespaced key. Stores read the
whole blob, transform it in memory and write the whole blob back.
"""

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from tracker.db.conn import db

logger = logging.getLogger(__name__)

T = TypeVar("T")

SETTINGS_KEY = "app_credentials"
WEEKS_KEY = "app_weeks"
TASKS_KEY = "app_tasks"
SUBMISSIONS_KEY = "app_submissions"

ALL_KEYS = (SETTINGS_KEY, WEEKS_KEY, TASKS_KEY, SUBMISSIONS_KEY)


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def _ensure_table():
    # Table is created by migrations; keep as guard in dev
    with db() as conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS kv ("
            "key TEXT PRIMARY KEY, value TEXT NOT NULL, "
            "updated_at_utc INTEGER NOT NULL)"
        )


class SqliteStorage:
    def get(self, key: str) -> Optional[str]:
        _ensure_table()
        with db() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        _ensure_table()
        with db() as conn:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at_utc) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                  value=excluded.value,
                  updated_at_utc=excluded.updated_at_utc
                """,
                (key, value, int(time.time())),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        _ensure_table()
        with db() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


_DEFAULT: Optional[SqliteStorage] = None


def default_storage() -> Storage:
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = SqliteStorage()
    return _DEFAULT


_LOCKS: Dict[str, threading.Lock] = {key: threading.Lock() for key in ALL_KEYS}


def collection_lock(key: str) -> threading.Lock:
    """Lock serializing read-modify-write on one collection."""
    return _LOCKS.setdefault(key, threading.Lock())


def read_json(storage: Storage, key: str, default: Any) -> Any:
    raw = storage.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("kv: malformed JSON under %s, treating as absent", key)
        return default


def read_records(
    storage: Storage, key: str, from_dict: Callable[[Dict[str, Any]], T]
) -> List[T]:
    """Parse a list collection, skipping entries that are not valid records."""
    raw = read_json(storage, key, [])
    if not isinstance(raw, list):
        return []
    records = []
    for d in raw:
        try:
            records.append(from_dict(d))
        except (KeyError, TypeError, ValueError):
            logger.warning("kv: skipping malformed record in %s: %r", key, d)
    return records


def write_json(storage: Storage, key: str, value: Any) -> None:
    storage.set(key, json.dumps(value, ensure_ascii=False, separators=(",", ":")))


def clear_all(storage: Optional[Storage] = None) -> None:
    """Full reset: drop settings, weeks, tasks and submissions."""
    storage = storage or default_storage()
    for key in ALL_KEYS:
        with collection_lock(key):
            storage.remove(key)
    logger.info("kv: all collections cleared")
