"""Raw key-value stores holding string values.

These are the device storage the app writes to. They may fail; callers go
through SafeAsyncStorage, which adds retries, JSON handling and size checks.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from fitcal.storage.connection import DatabaseConnection


class KeyValueStore(Protocol):
    """Async string key-value store."""

    async def get_item(self, key: str) -> Optional[str]: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqliteKeyValueStore:
    """Store persisting each key as a row of the ``kv_store`` table.

    sqlite3 calls are blocking, so they run in a worker thread.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db
        self.db.initialize_schema()

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def keys(self) -> list[str]:
        rows = self.db.execute_query("SELECT key FROM kv_store ORDER BY key")
        return [row["key"] for row in rows]

    def _get(self, key: str) -> Optional[str]:
        rows = self.db.execute_query("SELECT value FROM kv_store WHERE key = ?", (key,))
        return rows[0]["value"] if rows else None

    def _set(self, key: str, value: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )

    def _remove(self, key: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
