"""
SQLite-based blob storage for user data.

Each key holds one opaque JSON document. The whole user-data blob is
written in a single transaction so a logical update is never half-applied.
"""

import json
import logging
import os
import sqlite3
from pathlib import Path

from bodybalance.errors import StorageUnavailable

logger = logging.getLogger(__name__)

USER_DATA_KEY = "bodyBalanceData"
LANGUAGE_KEY = "bodyBalanceLanguage"


def _get_default_db_path() -> Path:
    """Get the default database path."""
    env_path = os.environ.get("BODYBALANCE_DB_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".bodybalance" / "bodybalance.db"


class BlobStorage:
    """SQLite-backed key-value store of JSON blobs."""

    def __init__(self, db_path: str | Path | None = None):
        """
        Initialize the blob storage.

        Args:
            db_path: Path to the SQLite database file.
                     Defaults to ~/.bodybalance/bodybalance.db
        """
        if db_path is None:
            db_path = _get_default_db_path()
        self.db_path = Path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot open {self.db_path}: {e}") from e

    def _init_db(self) -> None:
        """Create the blobs table if it doesn't exist."""
        try:
            # Ensure parent directory exists
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS blobs (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailable(f"Cannot initialize {self.db_path}: {e}") from e

    def load_blob(self, key: str):
        """
        Load a blob by key.

        Args:
            key: The blob key

        Returns:
            The decoded JSON value, or None if the key doesn't exist
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM blobs WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return None

        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageUnavailable(f"Stored value for {key!r} is not valid JSON: {e}") from e

    def persist_blob(self, key: str, value) -> None:
        """
        Write a blob (upserts).

        Args:
            key: The blob key
            value: Any JSON-serializable value
        """
        try:
            encoded = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageUnavailable(f"Value for {key!r} is not JSON-serializable: {e}") from e

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO blobs (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, encoded),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Failed to write {key!r}: {e}") from e

        logger.debug("Persisted %s (%d bytes)", key, len(encoded))

    def delete_blob(self, key: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if a blob was deleted, False if the key didn't exist
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Failed to delete {key!r}: {e}") from e
        return cursor.rowcount > 0

    def clear(self) -> None:
        """Delete all blobs. Primarily for testing."""
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM blobs")
                conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Failed to clear {self.db_path}: {e}") from e
