"""SQLite key/value store implementation."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CORE_CATALOG_KEY = "core-catalog-cache"
SPREADSHEET_CATALOG_KEY = "spreadsheet-catalog-cache"
USER_ENTRIES_KEY = "user-entries"
SYNC_QUEUE_KEY = "sync-queue"
SYNC_STATUS_KEY = "sync-status"
SAVED_RECITATIONS_KEY = "saved-recitations"


class LocalStore:
    """SQLite-based key/value store holding every persisted jaap value.

    Values are stored as JSON text, one row per key. Every write replaces
    the whole value for its key.
    """

    def __init__(self, data_dir: Path):
        """Initialize store with database in given directory.

        Args:
            data_dir: Directory containing the store database
        """
        self.data_dir = data_dir
        data_dir.mkdir(parents=True, exist_ok=True)

        self.db_path = data_dir / "store.db"
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection with WAL mode."""
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=30000")
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> Any | None:
        """Return the decoded value stored under key.

        Args:
            key: Store key

        Returns:
            Decoded JSON value, or None if absent or undecodable
        """
        conn = self._get_connection()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None

        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding undecodable value for '{key}': {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value.

        Args:
            key: Store key
            value: JSON-serializable value
        """
        payload = json.dumps(value)
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """,
                (key, payload, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def remove(self, key: str) -> None:
        """Delete key if present."""
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def keys(self) -> list[str]:
        """Return all stored keys in sorted order."""
        conn = self._get_connection()
        try:
            rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        finally:
            conn.close()
        return [row[0] for row in rows]
