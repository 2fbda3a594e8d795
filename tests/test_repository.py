"""Tests for the key-value store and settings model."""

import json

import aiosqlite

from dailywalk.db.migrations import run_migrations
from dailywalk.db.models import ClockTime, NotificationSettings, normalize_tone
from dailywalk.db.repository import Repository
from dailywalk.utils.constants import SETTINGS_KEY


def test_normalize_tone():
    assert normalize_tone("gentle") == "gentle"
    assert normalize_tone("accountable") == "accountable"
    assert normalize_tone("direct") == "accountable"
    assert normalize_tone("deep") == "gentle"
    assert normalize_tone("shouty") == "gentle"
    assert normalize_tone(None) == "gentle"
    assert normalize_tone(["accountable"]) == "gentle"


def test_settings_from_dict_merges_over_defaults():
    settings = NotificationSettings.from_dict(
        {"evening_reflection_enabled": True, "daily_reminder_time": {"hour": 6, "minute": 45}}
    )
    assert settings.evening_reflection_enabled
    assert settings.daily_reminder_time == ClockTime(6, 45)
    assert settings.streak_expiry_time == ClockTime(23, 59)
    assert settings.daily_reminder_enabled


def test_settings_from_dict_rejects_bad_values():
    settings = NotificationSettings.from_dict(
        {
            "daily_reminder_time": {"hour": 25, "minute": 0},
            "evening_reflection_time": "late",
            "midday_nudge_days_per_week": 12,
            "tone_preference": "direct",
        }
    )
    assert settings.daily_reminder_time == ClockTime(8, 0)
    assert settings.evening_reflection_time == ClockTime(21, 30)
    assert settings.midday_nudge_days_per_week == 7
    assert settings.tone_preference == "accountable"


def test_clock_time_parse():
    assert ClockTime.parse("07:05") == ClockTime(7, 5)
    assert str(ClockTime(7, 5)) == "07:05"


async def test_settings_default_when_missing(repo):
    assert await repo.get_settings() == NotificationSettings()


async def test_corrupted_settings_fall_back_to_defaults(repo):
    await repo.set(SETTINGS_KEY, "{not json")
    assert await repo.get_settings() == NotificationSettings()

    await repo.set(SETTINGS_KEY, "[1, 2]")
    assert await repo.get_settings() == NotificationSettings()

    await repo.set(SETTINGS_KEY, '{"tone_preference": ["gentle"], "reengagement_enabled": "false"}')
    assert await repo.get_settings() == NotificationSettings()


async def test_save_settings_merges(repo):
    await repo.save_settings(evening_reflection_enabled=True)
    saved = await repo.save_settings(daily_reminder_time=ClockTime(7, 15))

    assert saved.evening_reflection_enabled
    assert saved.daily_reminder_time == ClockTime(7, 15)
    assert await repo.get_settings() == saved


async def test_scheduled_ids_round_trip(repo):
    assert await repo.get_scheduled_ids() == []
    await repo.set_scheduled_ids(["daily_reminder:2026-03-03"])
    assert await repo.get_scheduled_ids() == ["daily_reminder:2026-03-03"]


async def test_pop_legacy_ids_reads_once(repo):
    await repo.set("@daily_reminder_notification_id", "abc")
    await repo.set("@streak_reminder_notification_id", "def")

    assert await repo.pop_legacy_ids() == ["abc", "def"]
    assert await repo.pop_legacy_ids() == []


async def test_camel_case_settings_are_migrated(tmp_path):
    db_path = tmp_path / "legacy.db"
    await run_migrations(db_path)
    async with aiosqlite.connect(db_path) as db:
        await db.execute(
            "INSERT INTO kv_store (key, value) VALUES (?, ?)",
            (
                SETTINGS_KEY,
                json.dumps(
                    {
                        "dailyReminderTime": {"hour": 6, "minute": 0},
                        "middayNudgeEnabled": True,
                        "tonePreference": "accountable",
                    }
                ),
            ),
        )
        await db.commit()

    await run_migrations(db_path)

    repo = Repository(db_path)
    await repo.connect()
    try:
        settings = await repo.get_settings()
    finally:
        await repo.close()

    assert settings.daily_reminder_time == ClockTime(6, 0)
    assert settings.midday_nudge_enabled
    assert settings.tone_preference == "accountable"


def test_settings_switches_accept_only_booleans():
    """String or numeric switches keep their defaults."""
    settings = NotificationSettings.from_dict(
        {
            "daily_reminder_enabled": "false",
            "midday_nudge_enabled": 1,
            "reengagement_enabled": False,
            "tone_preference": {"tone": "gentle"},
        }
    )
    assert settings.daily_reminder_enabled
    assert not settings.midday_nudge_enabled
    assert not settings.reengagement_enabled
    assert settings.tone_preference == "gentle"
