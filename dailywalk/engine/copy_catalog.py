"""Notification copy, chosen deterministically per category, tone and seed."""

from dataclasses import dataclass
from typing import Callable, Union

from dailywalk.db.models import normalize_tone
from dailywalk.engine.selector import pick_variant
from dailywalk.utils.constants import DEFAULT_TONE

APP_TITLE = "Give Me Guidance"
STREAK_TITLE = "Keep your streak alive"

Template = Callable[[int], str]
Copy = Union[str, Template]


@dataclass(frozen=True)
class NotificationText:
    title: str
    body: str


# category -> (title, {tone: bucket})
CATALOG: dict[str, tuple[str, dict[str, list[Copy]]]] = {
    # Daily habit builder
    "daily_reminder": (
        APP_TITLE,
        {
            "gentle": [
                "Start your morning with peace.",
                "Your daily walk is ready. Take a peaceful moment to connect with God.",
                "A quiet minute with Scripture is waiting for you.",
            ],
            "accountable": [
                "Take a moment with God before the day runs away.",
                "Time for today's guidance. Take two minutes and complete your daily step.",
                "Your daily walk is ready. Two minutes, then get on with your day.",
            ],
        },
    ),
    "midday_nudge": (
        APP_TITLE,
        {
            "gentle": [
                "Take 60 seconds with God.",
                "A short pause in the middle of the day can change the rest of it.",
            ],
            "accountable": [
                "Pause. Reset. You have time for today's guidance.",
                "Halfway through the day. Today's step is still open.",
            ],
        },
    ),
    "evening_reflection": (
        APP_TITLE,
        {
            "gentle": [
                "Before you sleep, reflect for a moment.",
                "Let today settle. A verse is waiting for you.",
            ],
            "accountable": [
                "End today with God, not your worries.",
                "Close the day well. Finish today's guidance.",
            ],
        },
    ),
    # Streak protection
    "streak_warn_4h": (
        STREAK_TITLE,
        {
            "gentle": ["Don't let today slip away."],
            "accountable": ["You're close to losing your streak. Finish today's guidance."],
        },
    ),
    "streak_warn_1h": (
        STREAK_TITLE,
        {
            "gentle": ["Your connection is waiting."],
            "accountable": ["One hour left. Keep your streak alive."],
        },
    ),
    "streak_final": (
        STREAK_TITLE,
        {
            "gentle": [
                lambda n: f"You've built this for {n} days. Don't stop now.",
                lambda n: f"{n} days of showing up. A few minutes keeps it going.",
            ],
            "accountable": [
                lambda n: f"{n} days strong. Don't break it today.",
                lambda n: f"Minutes left to protect your {n}-day streak.",
            ],
        },
    ),
    # Celebrations
    "milestone": (
        APP_TITLE,
        {
            DEFAULT_TONE: [
                lambda n: f"{n} days strong. Keep going.",
                lambda n: f"{n} days in a row. That's faithfulness.",
            ],
        },
    ),
    # Re-engagement
    "reengage_2d": (
        APP_TITLE,
        {
            "gentle": ["It's okay. Come back today."],
            "accountable": ["You've got this. Start again today."],
        },
    ),
    "reengage_5d": (
        APP_TITLE,
        {
            "gentle": ["God hasn't moved. You can always return."],
            "accountable": ["Come back. Your routine is still here for you."],
        },
    ),
    "reengage_weekly": (
        APP_TITLE,
        {
            "gentle": ["We saved today's message for you."],
            "accountable": ["Let's get back into it today."],
        },
    ),
}


def text_for(
    category: str, tone: str, seed: str, streak_count: int | None = None
) -> NotificationText:
    """Return the title and body for a notification.

    The same (category, tone, seed, streak_count) always gives the same
    text. Tones without a bucket of their own use the default tone's.
    """
    if category not in CATALOG:
        raise KeyError(f"Unknown notification category: {category}")

    title, buckets = CATALOG[category]
    bucket = buckets.get(normalize_tone(tone)) or buckets[DEFAULT_TONE]
    copy = pick_variant(bucket, f"{category}:{seed}")

    if callable(copy):
        body = copy(streak_count or 0)
    else:
        body = copy
    return NotificationText(title=title, body=body)
