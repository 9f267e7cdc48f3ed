from __future__ import annotations

import logging
import sqlite3
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SQLiteKeyValueStore:
    name: str = "sqlite"

    def __init__(self, *, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        cur = self._conn.cursor()
        try:
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_items (
                  key TEXT PRIMARY KEY,
                  value TEXT NOT NULL,
                  updated_at REAL NOT NULL
                );
                """
            )
            self._conn.commit()
        finally:
            cur.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            cur = self._conn.cursor()
            try:
                row = cur.execute("SELECT value FROM kv_items WHERE key = ?", (str(key),)).fetchone()
            finally:
                cur.close()
        return None if row is None else str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            cur = self._conn.cursor()
            try:
                cur.execute(
                    """
                    INSERT INTO kv_items(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at;
                    """,
                    (str(key), str(value), time.time()),
                )
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cur.close()

    def close(self) -> None:
        try:
            self._conn.close()
        except Exception:
            logger.error("[queue/sqlite] close failed", exc_info=True)
