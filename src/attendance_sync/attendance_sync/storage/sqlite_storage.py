from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from .repository import KeyValueStorage

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""


class SQLiteKeyValueStorage(KeyValueStorage):
    """Key-value storage on a single SQLite file.

    Each write runs in its own transaction and is committed before the call
    returns, so a crash can lose only a write that had not returned yet.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
            self._path,
            check_same_thread=False,
            isolation_level=None,
        )
        if self._path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=FULL")
        self._conn.execute(_SCHEMA)

    @property
    def path(self) -> str:
        return self._path

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("storage is closed")
        return self._conn

    @contextmanager
    def db_cursor(self) -> Iterator[Tuple[sqlite3.Connection, sqlite3.Cursor]]:
        with self._lock:
            conn = self._connection()
            cur = conn.cursor()
            try:
                cur.execute("BEGIN IMMEDIATE")
                try:
                    yield conn, cur
                    cur.execute("COMMIT")
                except Exception:
                    cur.execute("ROLLBACK")
                    raise
            finally:
                cur.close()

    def get_item(self, key: str) -> Optional[str]:
        with self.db_cursor() as (_, cur):
            cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.db_cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(key, value, updated_at)
                VALUES(?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with self.db_cursor() as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.debug("Closed storage %s", self._path)
