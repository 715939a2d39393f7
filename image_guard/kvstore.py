"""
Key-value store for plugin data.

Uses SQLite for persistence; values are stored JSON-encoded.
"""

import sqlite3
import json
import logging
from pathlib import Path
from typing import Any, Optional
from contextlib import contextmanager

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DB_NAME = "plugin_kv.db"

TEMPLATE_KEY_PREFIX = "template_key-"


class KVStoreError(Exception):
    """Failed to read or write a KV record."""
    pass


class KVStore:
    """Read/write access to the plugin's KV records."""

    def __init__(self, data_dir: Path | None = None):
        data_dir = data_dir if data_dir is not None else DATA_DIR
        data_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = data_dir / DB_NAME
        self._init_database()

    @contextmanager
    def _connection(self):
        """Context manager for database connections."""
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

    def _init_database(self) -> None:
        try:
            with self._connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
        except sqlite3.Error as e:
            raise KVStoreError(f"failed to initialize KV store: {e}") from e

        logger.info(f"KV store initialized at {self.db_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise KVStoreError(f"failed to get key {key!r}: {e}") from e

        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise KVStoreError(f"value for key {key!r} is not serializable: {e}") from e

        try:
            with self._connection() as conn:
                conn.execute("""
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (key, payload))
        except sqlite3.Error as e:
            raise KVStoreError(f"failed to set key {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
        try:
            with self._connection() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise KVStoreError(f"failed to delete key {key!r}: {e}") from e

    def get_template_data(self, user_id: str) -> str:
        """
        Example read of per-user data.

        Returns:
            The stored string, or "" if the user has none
        """
        try:
            value: Optional[str] = self.get(TEMPLATE_KEY_PREFIX + user_id)
        except KVStoreError as e:
            raise KVStoreError(f"failed to get template data: {e}") from e
        return value or ""
