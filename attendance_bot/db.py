from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from .models import RecordKey, WorkInterval


class Database:
    """Thin SQLite key/value layer holding one interval list per user and day."""

    def __init__(self, db_path: str | Path) -> None:
        self._conn = sqlite3.connect(str(db_path))
        self._conn.row_factory = sqlite3.Row
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        self._conn.close()
        self._closed = True

    def initialize(self) -> None:
        # day_records: JSON list of {"from": "HH:MM", "to": "HH:MM"} in entry order.
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS day_records (
              user TEXT NOT NULL,
              day TEXT NOT NULL,
              intervals TEXT NOT NULL,
              PRIMARY KEY (user, day)
            );
            """
        )
        self._conn.commit()

    def get(self, key: RecordKey) -> list[WorkInterval]:
        row = self._conn.execute(
            "SELECT intervals FROM day_records WHERE user = ? AND day = ?",
            (key.user, key.storage_day),
        ).fetchone()
        if row is None:
            return []
        return [WorkInterval.from_dict(item) for item in json.loads(row["intervals"])]

    def set(self, key: RecordKey, intervals: list[WorkInterval]) -> None:
        payload = json.dumps([item.to_dict() for item in intervals])
        self._conn.execute(
            """
            INSERT INTO day_records (user, day, intervals)
            VALUES (?, ?, ?)
            ON CONFLICT(user, day)
            DO UPDATE SET intervals=excluded.intervals
            """,
            (key.user, key.storage_day, payload),
        )
        self._conn.commit()

    def remove(self, key: RecordKey) -> None:
        self._conn.execute(
            "DELETE FROM day_records WHERE user = ? AND day = ?",
            (key.user, key.storage_day),
        )
        self._conn.commit()
