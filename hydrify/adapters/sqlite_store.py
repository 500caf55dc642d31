"""
Hydrify — SQLite blob store.

Persists the serialized entries, presets and preferences across restarts.
One row per key; every save overwrites the whole blob.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from hydrify.ports.store_port import StoreError

logger = logging.getLogger(__name__)


class SqliteBlobStore:
    """SQLite-backed implementation of BlobStore."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from hydrify.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the blobs table if it doesn't exist."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS blobs (
                        key        TEXT PRIMARY KEY,
                        value      TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open blob store at {self._db_path}: {exc}") from exc
        logger.debug("Blobs table initialized at %s", self._db_path)

    def load(self, key: str) -> str | None:
        """Fetch a blob by key, or None if it was never saved."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM blobs WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load '{key}': {exc}") from exc
        if row is None:
            return None
        return row["value"]

    def save(self, key: str, blob: str) -> None:
        """Insert or overwrite the blob stored under key."""
        now = datetime.now().isoformat()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO blobs (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, blob, now),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to save '{key}': {exc}") from exc
        logger.debug("Saved blob '%s' (%d bytes)", key, len(blob))
