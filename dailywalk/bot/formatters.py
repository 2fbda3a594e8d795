"""Message text formatters."""

from dailywalk.db.models import NotificationSettings, ScheduledNotification
from dailywalk.utils.time_utils import format_local


def _on_off(enabled: bool) -> str:
    return "on" if enabled else "off"


def format_welcome_message() -> str:
    return (
        "<b>Welcome to your daily walk</b>\n\n"
        "I'll remind you to spend a few minutes with God each day and help you "
        "keep your streak going.\n\n"
        "When you've finished today's guidance, send /done.\n"
        "See your reminders with /status."
    )


def format_help_message() -> str:
    return (
        "<b>Commands</b>\n\n"
        "/done - mark today's walk complete\n"
        "/status - streak, settings and upcoming reminders\n"
        "/remind HH:MM - daily reminder time\n"
        "/evening HH:MM|off - evening reflection\n"
        "/nudge N|off - midday nudges, N days a week\n"
        "/tone gentle|accountable - reminder style\n"
        "/streakguard on|off - warnings before your streak expires\n"
        "/comeback on|off - reminders after a few days away"
    )


def format_settings(settings: NotificationSettings) -> str:
    lines = ["<b>Reminders</b>"]
    lines.append(
        f"Daily reminder: {_on_off(settings.daily_reminder_enabled)} "
        f"at {settings.daily_reminder_time}"
    )
    nudge = (
        f"{settings.midday_nudge_days_per_week} days/week"
        if settings.midday_nudge_enabled
        else "off"
    )
    lines.append(f"Midday nudge: {nudge}")
    evening = (
        f"at {settings.evening_reflection_time}" if settings.evening_reflection_enabled else "off"
    )
    lines.append(f"Evening reflection: {evening}")
    lines.append(
        f"Streak protection: {_on_off(settings.streak_protection_enabled)} "
        f"(expires {settings.streak_expiry_time})"
    )
    lines.append(f"Come-back reminders: {_on_off(settings.reengagement_enabled)}")
    lines.append(f"Tone: {settings.tone_preference}")
    return "\n".join(lines)


def format_schedule(notifications: list[ScheduledNotification], tz: str) -> str:
    if not notifications:
        return "No reminders scheduled."

    lines = [f"<b>Upcoming ({len(notifications)})</b>"]
    for notification in sorted(notifications, key=lambda n: n.fire_at):
        lines.append(f"{format_local(notification.fire_at, tz)} - {notification.body}")
    return "\n".join(lines)


def format_status(
    settings: NotificationSettings,
    streak: int,
    longest: int,
    notifications: list[ScheduledNotification],
    tz: str,
) -> str:
    return "\n\n".join(
        [
            f"🔥 Streak: <b>{streak}</b> (best {longest})",
            format_settings(settings),
            format_schedule(notifications, tz),
        ]
    )
