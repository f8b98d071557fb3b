from __future__ import annotations

import sqlite3
from typing import Optional


class KeyValueRepo:
    """Opaque text blobs by key; the history logs serialize themselves."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_item(self, key: str) -> Optional[str]:
        cur = self.conn.cursor()
        cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cur.fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        self.conn.execute(
            (
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at"
            ),
            (key, value),
        )
        self.conn.commit()

    def remove_item(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self.conn.commit()
