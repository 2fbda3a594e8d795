"""Tests for daily completion handling."""

from datetime import timedelta

from conftest import NOW, TODAY

from dailywalk.db.models import parse_notification_id
from dailywalk.engine.completion import is_milestone
from dailywalk.utils.constants import SAME_DAY_CATEGORIES
from dailywalk.utils.time_utils import add_days


async def _busy_day(repo, engine):
    await repo.save_settings(
        midday_nudge_enabled=True,
        midday_nudge_days_per_week=7,
        evening_reflection_enabled=True,
        daily_reminder_enabled=False,
    )
    await repo.set_last_completion_date(add_days(TODAY, -1))
    await engine.recompute_schedule(6, NOW)


def test_is_milestone():
    """Milestone streak lengths."""
    assert is_milestone(7)
    assert is_milestone(30)
    assert not is_milestone(6)
    assert not is_milestone(0)


async def test_completion_cancels_same_day_notifications(repo, notifier, engine, tracker):
    """Completion clears today's nudges and warnings."""
    await _busy_day(repo, engine)
    assert any(
        parse_notification_id(i) == ("evening_reflection", TODAY)
        for i in await notifier.list_scheduled()
    )

    await tracker.on_daily_completion(7, NOW)

    for identifier in await notifier.list_scheduled():
        category, day = parse_notification_id(identifier)
        assert not (category in SAME_DAY_CATEGORIES and day == TODAY), identifier


async def test_completion_records_today(repo, tracker):
    """Completion stores today's date."""
    await tracker.on_daily_completion(1, NOW)

    assert await repo.get_last_completion_date() == TODAY


async def test_completion_cancels_externally_scheduled_urgency(repo, notifier, tracker):
    """Same-day warnings go even if the engine lost track of them."""
    # Scheduled by an earlier run whose id list was lost
    notifier.scheduled[f"streak_warn_1h:{TODAY}"] = None  # type: ignore
    notifier.scheduled["unrelated-job"] = None  # type: ignore

    await tracker.on_daily_completion(2, NOW)

    assert f"streak_warn_1h:{TODAY}" not in notifier.scheduled
    assert "unrelated-job" in notifier.scheduled


async def test_milestone_celebration(repo, notifier, tracker):
    """A milestone streak schedules a celebration a few seconds out."""
    await tracker.on_daily_completion(7, NOW)

    milestone = notifier.scheduled[f"milestone:{TODAY}:7"]
    assert milestone.category == "milestone"
    assert "7" in milestone.body
    assert 0 < (milestone.fire_at - NOW).total_seconds() <= 10
    # Not owned by the engine, so the follow-up recompute leaves it alone
    assert milestone.identifier not in await repo.get_scheduled_ids()


async def test_no_celebration_between_milestones(repo, notifier, tracker):
    """Ordinary streak days get no celebration."""
    await tracker.on_daily_completion(6, NOW)

    assert not any(i.startswith("milestone:") for i in notifier.scheduled)


async def test_completion_recomputes_remaining_horizon(repo, notifier, engine, tracker):
    """Completion reschedules the days still ahead."""
    await tracker.on_daily_completion(4, NOW)

    ids = await repo.get_scheduled_ids()
    assert ids
    assert f"daily_reminder:{TODAY}" not in ids
    assert f"daily_reminder:{add_days(TODAY, 1)}" in ids


async def test_repeat_completion_celebrates_once(repo, notifier, tracker):
    """Completing twice on a milestone day schedules one celebration."""
    await tracker.on_daily_completion(7, NOW)
    await tracker.on_daily_completion(7, NOW + timedelta(minutes=5))

    milestones = [n.identifier for n in notifier.submitted if n.category == "milestone"]
    assert milestones == [f"milestone:{TODAY}:7"]
