"""Database migration runner."""

import json
import logging
import re
from pathlib import Path

import aiosqlite

from dailywalk.utils.constants import SETTINGS_KEY

logger = logging.getLogger(__name__)


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


async def init_database(db: aiosqlite.Connection) -> None:
    """Create the key-value table."""
    schema_path = Path(__file__).parent / "schema.sql"
    with open(schema_path) as f:
        schema_sql = f.read()

    await db.executescript(schema_sql)
    await db.commit()


async def migrate_camel_case_settings(db: aiosqlite.Connection) -> None:
    """Rewrite settings saved by older clients with camelCase keys.

    e.g. {"dailyReminderTime": {...}} -> {"daily_reminder_time": {...}}.
    Unreadable payloads are left alone; the settings loader falls back to
    defaults for them.
    """
    async with db.execute("SELECT value FROM kv_store WHERE key = ?", (SETTINGS_KEY,)) as cursor:
        row = await cursor.fetchone()
    if row is None:
        return

    try:
        stored = json.loads(row[0])
    except json.JSONDecodeError:
        return
    if not isinstance(stored, dict) or not any(re.search(r"[A-Z]", k) for k in stored):
        return

    migrated = {_snake_case(k): v for k, v in stored.items()}
    await db.execute(
        "UPDATE kv_store SET value = ?, updated_at = datetime('now') WHERE key = ?",
        (json.dumps(migrated), SETTINGS_KEY),
    )
    await db.commit()
    logger.info(f"Migrated {len(migrated)} camelCase settings keys")


async def run_migrations(db_path: Path) -> None:
    """Run any pending migrations."""
    async with aiosqlite.connect(db_path) as db:
        await init_database(db)
        await migrate_camel_case_settings(db)

    logger.info(f"Database ready at {db_path}")
