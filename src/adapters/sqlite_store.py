"""
SQLite adapter for KeyValueStore.

Use ":memory:" for tests, a file path for production.
"""

import sqlite3
from datetime import datetime, timezone

from src.domain.errors import PersistenceError
from src.domain.key_value_store import KeyValueStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteKeyValueStore(KeyValueStore):

    def __init__(self, db_path: str = "bookings.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> str | None:
        try:
            row = self._conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read {key!r}") from exc
        if not row:
            return None
        return row["value"]

    async def set(self, key: str, value: str) -> None:
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, _now()),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to write {key!r}") from exc

    async def remove(self, key: str) -> None:
        try:
            self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self._conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to remove {key!r}") from exc

    def close(self) -> None:
        self._conn.close()
