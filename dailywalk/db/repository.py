"""Key-value store repository."""

import json
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path

import aiosqlite

from dailywalk.db.models import CompletionRecord, NotificationSettings, StreakState
from dailywalk.utils.constants import (
    CHAT_ID_KEY,
    LAST_COMPLETION_KEY,
    LEGACY_ID_KEYS,
    SCHEDULED_IDS_KEY,
    SETTINGS_KEY,
    STREAK_KEY,
)

logger = logging.getLogger(__name__)


class Repository:
    """Per-install key-value store on SQLite."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open database connection."""
        self._db = await aiosqlite.connect(self.db_path)
        logger.info(f"Connected to database at {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._db:
            await self._db.close()
            self._db = None
            logger.info("Database connection closed")

    @property
    def db(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._db is None:
            raise RuntimeError("Database not connected")
        return self._db

    # Raw key-value operations

    async def get(self, key: str) -> str | None:
        async with self.db.execute("SELECT value FROM kv_store WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        await self.db.execute(
            """
            INSERT INTO kv_store (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = datetime('now')
            """,
            (key, value),
        )
        await self.db.commit()

    async def delete(self, key: str) -> None:
        await self.db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await self.db.commit()

    # Settings

    async def get_settings(self) -> NotificationSettings:
        """Load settings, falling back to defaults if missing or corrupted."""
        stored = await self.get(SETTINGS_KEY)
        if not stored:
            return NotificationSettings()
        try:
            data = json.loads(stored)
            if not isinstance(data, dict):
                raise ValueError("settings payload is not an object")
            return NotificationSettings.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupted notification settings, using defaults: {e}")
            return NotificationSettings()

    async def save_settings(self, **changes) -> NotificationSettings:
        """Merge changes over the current settings and store the result."""
        merged = (await self.get_settings()).to_dict()
        for name, value in changes.items():
            if name not in merged:
                raise KeyError(f"Unknown setting: {name}")
            merged[name] = asdict(value) if is_dataclass(value) else value

        settings = NotificationSettings.from_dict(merged)
        await self.set(SETTINGS_KEY, json.dumps(settings.to_dict()))
        return settings

    # Completion

    async def get_last_completion_date(self) -> str | None:
        return await self.get(LAST_COMPLETION_KEY)

    async def set_last_completion_date(self, date_str: str) -> None:
        await self.set(LAST_COMPLETION_KEY, date_str)

    async def get_completion_record(self) -> CompletionRecord:
        return CompletionRecord(await self.get_last_completion_date())

    # Engine-owned identifiers

    async def get_scheduled_ids(self) -> list[str]:
        stored = await self.get(SCHEDULED_IDS_KEY)
        if not stored:
            return []
        try:
            ids = json.loads(stored)
        except json.JSONDecodeError:
            logger.warning("Corrupted scheduled id list, treating as empty")
            return []
        return [i for i in ids if isinstance(i, str)] if isinstance(ids, list) else []

    async def set_scheduled_ids(self, ids: list[str]) -> None:
        await self.set(SCHEDULED_IDS_KEY, json.dumps(ids))

    async def pop_legacy_ids(self) -> list[str]:
        """Read and clear identifiers stored under the old single-id keys."""
        ids = []
        for key in LEGACY_ID_KEYS:
            value = await self.get(key)
            if value:
                ids.append(value)
                await self.delete(key)
        return ids

    # Streak

    async def get_streak(self) -> StreakState:
        stored = await self.get(STREAK_KEY)
        if not stored:
            return StreakState()
        try:
            return StreakState(**json.loads(stored))
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupted streak state, starting fresh: {e}")
            return StreakState()

    async def save_streak(self, streak: StreakState) -> None:
        await self.set(STREAK_KEY, json.dumps(asdict(streak)))

    # Delivery target

    async def get_chat_id(self) -> int | None:
        stored = await self.get(CHAT_ID_KEY)
        return int(stored) if stored else None

    async def set_chat_id(self, chat_id: int) -> None:
        await self.set(CHAT_ID_KEY, str(chat_id))
