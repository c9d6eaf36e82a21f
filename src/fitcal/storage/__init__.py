"""Key-value persistence."""

from fitcal.storage.backends import (
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)
from fitcal.storage.connection import DatabaseConnection, get_db, set_db
from fitcal.storage.safe_storage import SafeAsyncStorage, StorageKey

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqliteKeyValueStore",
    "DatabaseConnection",
    "get_db",
    "set_db",
    "SafeAsyncStorage",
    "StorageKey",
]
