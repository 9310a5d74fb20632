# storage/settings_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import InvalidValue
from .database import Database

logger = logging.getLogger(__name__)


def _check_key(key: Any) -> str:
    if not isinstance(key, str) or not key.strip():
        raise InvalidValue("setting key must be a non-empty string")
    return key.strip()


class SettingsStore:
    """
    Flat key/value preferences (the `settings` table).

    Not coupled to the todo tree: todo operations never read or delete these rows.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def get_settings(self) -> dict[str, str]:
        with self._db.reading() as conn:
            rows = conn.execute("SELECT key, value FROM settings").fetchall()
            return {str(r["key"]): r["value"] for r in rows}

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        key = _check_key(key)
        with self._db.reading() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else default

    def save_setting(self, key: str, value: Any) -> None:
        self.save_settings({key: value})

    def save_settings(self, values: Mapping[str, Any]) -> None:
        """Upsert every pair in one transaction; values are stored as text."""
        pairs = [(_check_key(k), str(v)) for k, v in values.items()]
        if not pairs:
            return
        with self._db.transaction() as conn:
            conn.executemany(
                """
                INSERT INTO settings(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                pairs,
            )
        logger.debug("SettingsStore saved keys=%s", [k for k, _ in pairs])
