"""Constants and default values."""

from dataclasses import dataclass


@dataclass
class ChannelConfig:
    """Delivery channel used to group notifications."""

    name: str
    importance: str  # "low", "default" or "high"


# Delivery channels
CHANNEL_ROUTINE = "routine"
CHANNEL_STREAK = "streak"
CHANNEL_REENGAGEMENT = "reengagement"

CHANNELS = {
    CHANNEL_ROUTINE: ChannelConfig("Daily reminders", "default"),
    CHANNEL_STREAK: ChannelConfig("Streak protection", "high"),
    CHANNEL_REENGAGEMENT: ChannelConfig("Come back reminders", "low"),
}

# Category -> channel
CATEGORY_CHANNELS = {
    "daily_reminder": CHANNEL_ROUTINE,
    "midday_nudge": CHANNEL_ROUTINE,
    "evening_reflection": CHANNEL_ROUTINE,
    "streak_warn_4h": CHANNEL_STREAK,
    "streak_warn_1h": CHANNEL_STREAK,
    "streak_final": CHANNEL_STREAK,
    "milestone": CHANNEL_ROUTINE,
    "reengage_2d": CHANNEL_REENGAGEMENT,
    "reengage_5d": CHANNEL_REENGAGEMENT,
    "reengage_weekly": CHANNEL_REENGAGEMENT,
}

# Moot once today's walk is done
SAME_DAY_CATEGORIES = frozenset(
    {
        "midday_nudge",
        "evening_reflection",
        "streak_warn_4h",
        "streak_warn_1h",
        "streak_final",
        "reengage_2d",
        "reengage_5d",
        "reengage_weekly",
    }
)

# Budget
HORIZON_DAYS = 7
MAX_PER_WEEK = 7
MAX_PER_DAY = 2
MAX_PER_DAY_AT_RISK = 3

# Daily reminder is pulled back this far when it would land after expiry
REMINDER_EXPIRY_MARGIN_MINUTES = 120

# Streak ladder: (category, minutes before expiry, minimum streak)
STREAK_LADDER = [
    ("streak_warn_4h", 240, 1),
    ("streak_warn_1h", 60, 1),
    ("streak_final", 15, 5),
]

# Midday window: [12:00, 14:00)
MIDDAY_WINDOW_START_HOUR = 12
MIDDAY_WINDOW_HOURS = 2

# Re-engagement ladder
REENGAGE_HOUR = 18
REENGAGE_MINUTE = 0
REENGAGE_WEEKLY_COUNT = 4

# Celebrations
MILESTONES = frozenset({3, 7, 14, 30, 50, 100, 365})
MILESTONE_DELAY_SECONDS = 5

# Tones
TONES = ("gentle", "accountable")
DEFAULT_TONE = "gentle"
TONE_MIGRATIONS = {
    "direct": "accountable",
    "deep": "gentle",
    "encouraging": "gentle",
}

# Key-value store keys
SETTINGS_KEY = "@notification_settings"
LAST_COMPLETION_KEY = "@last_completion_date"
SCHEDULED_IDS_KEY = "@scheduled_notification_ids"
STREAK_KEY = "@streak"
CHAT_ID_KEY = "@chat_id"

# Written by older releases; read and cleared only
LEGACY_ID_KEYS = (
    "@daily_reminder_notification_id",
    "@streak_reminder_notification_id",
)

# Default timezone
DEFAULT_TIMEZONE = "America/New_York"
