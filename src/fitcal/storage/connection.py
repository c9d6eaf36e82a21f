"""Database connection management using raw sqlite3."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from fitcal.storage.schema import get_schema_sql


class DatabaseConnection:
    """Manages SQLite connections for the key-value table."""

    def __init__(self, db_path: Path):
        """Initialize database connection manager.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Create parent directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections.

        Yields:
            sqlite3.Connection with Row factory enabled

        Example:
            with db.get_connection() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create all tables if they don't exist."""
        with self.get_connection() as conn:
            conn.executescript(get_schema_sql())

    def execute_query(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute a query and return results.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            List of Row objects
        """
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            return cursor.fetchall()


# Global database instance (lazy loaded)
_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """Get the global database instance.

    Lazily initializes the database connection using settings.

    Returns:
        DatabaseConnection instance
    """
    global _db
    if _db is None:
        from fitcal.config import get_settings

        settings = get_settings()
        _db = DatabaseConnection(settings.storage.path)
        _db.initialize_schema()
    return _db


def set_db(db: DatabaseConnection) -> None:
    """Set the global database instance.

    Useful for testing with a custom database.

    Args:
        db: DatabaseConnection instance to use
    """
    global _db
    _db = db
