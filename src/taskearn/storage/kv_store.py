# src/taskearn/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..core.errors import StorageCapacityError

logger = logging.getLogger(__name__)

_FULL_MARKERS = ("database or disk is full", "string or blob too big")


class SQLiteKeyValueStore:
    """
    SQLite key-value store with atomic whole-value replace per key.

    Values are text (JSON encoded by callers). max_value_bytes > 0 caps the
    encoded size of a single value; oversized writes raise StorageCapacityError,
    as does SQLite running out of space.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "cache.sqlite3", *, max_value_bytes: int = 0) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._max_value_bytes = max(0, int(max_value_bytes))
        self._ensure_schema()
        logger.info(
            "KeyValueStore ready db=%s keys=%s max_value_bytes=%s",
            self._db_path,
            self.count(),
            self._max_value_bytes or "unlimited",
        )

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def count(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM kv").fetchone()
            return int(n)
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return str(row["value"]) if row else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self._max_value_bytes and size > self._max_value_bytes:
            raise StorageCapacityError(key, size, self._max_value_bytes)

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        except (sqlite3.OperationalError, sqlite3.DataError) as e:
            if any(marker in str(e).lower() for marker in _FULL_MARKERS):
                raise StorageCapacityError(key, size) from e
            raise
        finally:
            conn.close()
        logger.debug("kv set key=%s bytes=%s", key, size)

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            return [str(r["key"]) for r in conn.execute("SELECT key FROM kv ORDER BY key")]
        finally:
            conn.close()
