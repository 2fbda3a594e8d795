"""Tests for time utilities."""

from datetime import datetime
from zoneinfo import ZoneInfo

from dailywalk.utils.time_utils import (
    add_days,
    date_at,
    days_between,
    local_parts,
    today_str,
)

TZ = "America/New_York"
UTC = ZoneInfo("UTC")


def test_local_parts():
    """UTC instants read back as New York wall time."""
    # 03:30 UTC on Mar 3 is still Mar 2 in EST
    instant = datetime(2026, 3, 3, 3, 30, tzinfo=UTC)
    assert local_parts(instant, TZ) == ("2026-03-02", 22, 30)


def test_today_str_uses_configured_timezone():
    now = datetime(2026, 7, 1, 2, 0, tzinfo=UTC)
    assert today_str(TZ, now) == "2026-06-30"
    assert today_str("UTC", now) == "2026-07-01"


def test_date_at_standard_and_daylight_time():
    # EST is UTC-5, EDT is UTC-4
    assert date_at("2026-01-15", 8, 0, TZ) == datetime(2026, 1, 15, 13, 0, tzinfo=UTC)
    assert date_at("2026-07-15", 8, 0, TZ) == datetime(2026, 7, 15, 12, 0, tzinfo=UTC)


def test_date_at_round_trips_around_dst_transitions():
    """Spring forward is 2026-03-08, fall back is 2026-11-01 in New York."""
    for day in ("2026-03-07", "2026-03-08", "2026-03-09", "2026-10-31", "2026-11-01", "2026-11-02"):
        instant = date_at(day, 8, 0, TZ)
        assert local_parts(instant, TZ) == (day, 8, 0)


def test_date_at_late_evening_crosses_utc_midnight():
    instant = date_at("2026-03-02", 23, 59, TZ)
    assert instant == datetime(2026, 3, 3, 4, 59, tzinfo=UTC)
    assert local_parts(instant, TZ) == ("2026-03-02", 23, 59)


def test_date_at_missing_wall_time_falls_back_to_naive_estimate():
    # 02:30 does not exist on the spring-forward day
    instant = date_at("2026-03-08", 2, 30, TZ)
    assert instant == datetime(2026, 3, 8, 2, 30, tzinfo=UTC)


def test_date_at_probe_range_too_narrow():
    """An offset range that misses the zone's offset degrades gracefully."""
    instant = date_at("2026-01-15", 8, 0, TZ, probe_hours=range(0, 3))
    assert instant == datetime(2026, 1, 15, 8, 0, tzinfo=UTC)


def test_add_days():
    assert add_days("2026-03-02", 1) == "2026-03-03"
    assert add_days("2026-02-28", 1) == "2026-03-01"
    assert add_days("2026-12-31", 1) == "2027-01-01"
    assert add_days("2026-03-02", -2) == "2026-02-28"
    # Across the spring-forward transition
    assert add_days("2026-03-07", 2) == "2026-03-09"


def test_days_between():
    assert days_between("2026-02-28", "2026-03-02") == 2
    assert days_between("2026-03-02", "2026-03-02") == 0
    assert days_between("2026-03-09", "2026-03-02") == -7
    assert days_between("2026-10-25", "2026-11-08") == 14
