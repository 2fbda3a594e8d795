"""Calendar-date and timezone utilities for the configured region."""

import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")

# Dates are anchored at noon so day arithmetic never lands on a clock shift
_ANCHOR = time(12, 0)

DEFAULT_PROBE_HOURS = range(-14, 15)


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_parts(instant: datetime, tz: str) -> tuple[str, int, int]:
    """Return (YYYY-MM-DD, hour, minute) of an instant as observed in tz."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    local = instant.astimezone(ZoneInfo(tz))
    return local.date().isoformat(), local.hour, local.minute


def local_date(instant: datetime, tz: str) -> str:
    """Calendar date of an instant in tz."""
    return local_parts(instant, tz)[0]


def today_str(tz: str, now: datetime | None = None) -> str:
    """Today's date in tz."""
    if now is None:
        now = utc_now()
    return local_date(now, tz)


def date_at(
    date_str: str,
    hour: int,
    minute: int,
    tz: str,
    probe_hours: range = DEFAULT_PROBE_HOURS,
) -> datetime:
    """Find the UTC instant that reads as date_str hour:minute in tz.

    Starts from the naive estimate (the wall clock read as UTC) and probes
    whole-hour offsets around it, keeping the first one that formats back to
    exactly the requested date and time. This follows daylight-saving
    transitions without any offset tables of our own.

    Returns the naive estimate when no offset matches, e.g. for a wall time
    skipped by a spring-forward transition.
    """
    naive = datetime.combine(date.fromisoformat(date_str), time(hour, minute), tzinfo=UTC)
    target = (date_str, hour, minute)

    for offset in probe_hours:
        candidate = naive + timedelta(hours=offset)
        if local_parts(candidate, tz) == target:
            return candidate

    logger.warning(
        f"No UTC offset in {probe_hours.start}..{probe_hours.stop - 1}h matches "
        f"{date_str} {hour:02d}:{minute:02d} in {tz}; using naive estimate"
    )
    return naive


def add_days(date_str: str, days: int) -> str:
    """Shift a YYYY-MM-DD date string by a number of days."""
    anchored = datetime.combine(date.fromisoformat(date_str), _ANCHOR)
    return (anchored + timedelta(days=days)).date().isoformat()


def days_between(start: str, end: str) -> int:
    """Whole days from start to end (negative if end is earlier)."""
    a = datetime.combine(date.fromisoformat(start), _ANCHOR)
    b = datetime.combine(date.fromisoformat(end), _ANCHOR)
    return round((b - a).total_seconds() / 86400)


def format_local(instant: datetime, tz: str) -> str:
    """Human-readable local time, e.g. 'Mon Mar 02 19:59'."""
    return instant.astimezone(ZoneInfo(tz)).strftime("%a %b %d %H:%M")
