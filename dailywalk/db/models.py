"""Data models."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Literal

from dailywalk.utils.constants import DEFAULT_TONE, TONE_MIGRATIONS, TONES

logger = logging.getLogger(__name__)


Category = Literal[
    "daily_reminder",
    "midday_nudge",
    "evening_reflection",
    "streak_warn_4h",
    "streak_warn_1h",
    "streak_final",
    "milestone",
    "reengage_2d",
    "reengage_5d",
    "reengage_weekly",
]


@dataclass
class ClockTime:
    """Wall-clock time of day."""

    hour: int
    minute: int

    def is_valid(self) -> bool:
        return 0 <= self.hour <= 23 and 0 <= self.minute <= 59

    @property
    def minutes(self) -> int:
        """Minutes since midnight."""
        return self.hour * 60 + self.minute

    @classmethod
    def from_minutes(cls, minutes: int) -> "ClockTime":
        minutes = max(0, min(minutes, 23 * 60 + 59))
        return cls(minutes // 60, minutes % 60)

    @classmethod
    def parse(cls, value: str) -> "ClockTime":
        """Parse an HH:MM string."""
        hour_str, minute_str = value.strip().split(":", maxsplit=1)
        clock = cls(int(hour_str), int(minute_str))
        if not clock.is_valid():
            raise ValueError(f"Invalid time of day: {value}")
        return clock

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def normalize_tone(tone) -> str:
    """Map legacy or unknown tone values onto a supported tone."""
    if not isinstance(tone, str):
        return DEFAULT_TONE
    if tone in TONES:
        return tone
    return TONE_MIGRATIONS.get(tone, DEFAULT_TONE)


@dataclass
class NotificationSettings:
    """User notification preferences."""

    daily_reminder_enabled: bool = True
    daily_reminder_time: ClockTime = field(default_factory=lambda: ClockTime(8, 0))
    streak_protection_enabled: bool = True
    midday_nudge_enabled: bool = False
    midday_nudge_days_per_week: int = 3
    evening_reflection_enabled: bool = False
    evening_reflection_time: ClockTime = field(default_factory=lambda: ClockTime(21, 30))
    reengagement_enabled: bool = True
    tone_preference: str = DEFAULT_TONE
    streak_expiry_time: ClockTime = field(default_factory=lambda: ClockTime(23, 59))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationSettings":
        """Build settings from stored data, merged over defaults.

        Bad switch and clock values fall back to the field default, the nudge
        count is clamped to 0-7 and the tone goes through the migration table.
        """
        settings = cls()

        for name in (
            "daily_reminder_enabled",
            "streak_protection_enabled",
            "midday_nudge_enabled",
            "evening_reflection_enabled",
            "reengagement_enabled",
        ):
            value = data.get(name)
            if isinstance(value, bool):
                setattr(settings, name, value)
            elif value is not None:
                logger.warning(f"Ignoring non-boolean {name}: {value!r}")

        for name in ("daily_reminder_time", "evening_reflection_time", "streak_expiry_time"):
            raw = data.get(name)
            if raw is None:
                continue
            try:
                clock = ClockTime(int(raw["hour"]), int(raw["minute"]))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Ignoring malformed {name}: {raw!r}")
                continue
            if clock.is_valid():
                setattr(settings, name, clock)
            else:
                logger.warning(f"Ignoring out-of-range {name}: {clock.hour}:{clock.minute}")

        if "midday_nudge_days_per_week" in data:
            try:
                days = int(data["midday_nudge_days_per_week"])
            except (TypeError, ValueError):
                days = settings.midday_nudge_days_per_week
            settings.midday_nudge_days_per_week = max(0, min(days, 7))

        settings.tone_preference = normalize_tone(data.get("tone_preference"))
        return settings


@dataclass
class ScheduledNotification:
    """A notification handed to the notifier."""

    identifier: str
    category: Category
    title: str
    body: str
    fire_at: datetime  # UTC
    channel: str


@dataclass
class CompletionRecord:
    """Most recent daily completion."""

    last_completion_date: str | None = None  # YYYY-MM-DD in the configured timezone


@dataclass
class StreakState:
    """Consecutive days with a completed walk."""

    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: str | None = None  # YYYY-MM-DD


def notification_id(category: str, date_str: str, disambiguator: str | int | None = None) -> str:
    """Build the deterministic identifier for a notification."""
    if disambiguator is None:
        return f"{category}:{date_str}"
    return f"{category}:{date_str}:{disambiguator}"


def parse_notification_id(identifier: str) -> tuple[str, str | None]:
    """Split an identifier into (category, date_str)."""
    parts = identifier.split(":")
    if len(parts) < 2:
        return parts[0], None
    return parts[0], parts[1]
