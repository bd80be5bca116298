"""Settings repository implementation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.models import Setting
from .database import Database


class SettingsRepository:
    """Repository for key-value settings rows."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _to_setting(row) -> Setting:
        return Setting(
            key=row["key"],
            value=row["value"],
            category=row["category"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get(self, key: str) -> Optional[Setting]:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "SELECT key, value, category, updated_at FROM settings WHERE key = ?",
            (key,),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return self._to_setting(row)

    def get_all(self) -> list[Setting]:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "SELECT key, value, category, updated_at FROM settings ORDER BY category, key"
        )
        return [self._to_setting(row) for row in cursor.fetchall()]

    def get_by_category(self, category: str) -> list[Setting]:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "SELECT key, value, category, updated_at FROM settings WHERE category = ? ORDER BY key",
            (category,),
        )
        return [self._to_setting(row) for row in cursor.fetchall()]

    def set(self, key: str, value: str, category: str) -> Setting:
        """Upsert a row and commit, so the write is durable on return."""
        setting = Setting.create(key, value, category)
        conn = self._db.get_connection()
        conn.execute(
            """
            INSERT INTO settings (key, value, category, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                category = excluded.category,
                updated_at = excluded.updated_at
            """,
            (setting.key, setting.value, setting.category, setting.updated_at.isoformat()),
        )
        conn.commit()
        return setting

    def delete(self, key: str) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0

    def get_value(self, key: str, default: str = "") -> str:
        setting = self.get(key)
        return setting.value if setting else default
