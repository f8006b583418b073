"""
SQLite-based key-value store implementation.

Tables:
- kv_store: one JSON document per key
"""

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .base import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class SqliteKeyValueStore(KeyValueStore):
    """
    SQLite-backed key-value store.

    Each key holds a JSON document. Values are read and written whole, so a
    registry update is a read-modify-write of the full list.

    Safe for single-writer scenarios.
    """

    def __init__(self, db_path: Path | str):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_db()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open state database {self.db_path}: {e}") from e

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,  -- JSON document
                    updated_at TEXT NOT NULL
                )
            """
            )

    def get(self, key: str) -> Any | None:
        try:
            with self._transaction() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

        if row is None:
            return None

        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON stored under '{key}': {e}") from e

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}") from e

        now = datetime.now(timezone.utc).isoformat()
        try:
            with self._transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """,
                    (key, payload, now),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

        logger.debug(f"Stored '{key}' ({len(payload)} bytes)")

    def remove(self, key: str) -> None:
        self.remove_multiple([key])

    def remove_multiple(self, keys: list[str] | tuple[str, ...]) -> None:
        """Delete several keys in a single transaction."""
        if not keys:
            return
        try:
            with self._transaction() as conn:
                conn.executemany("DELETE FROM kv_store WHERE key = ?", [(k,) for k in keys])
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove {list(keys)}: {e}") from e

        logger.debug(f"Removed keys: {', '.join(keys)}")

    def keys(self) -> list[str]:
        try:
            with self._transaction() as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e
        return [row["key"] for row in rows]
