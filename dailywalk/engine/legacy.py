"""Adapters for callers written against the single daily reminder API."""

import logging

from dailywalk.db.models import ClockTime
from dailywalk.engine.scheduler import SchedulingEngine
from dailywalk.engine.streak import StreakCounter
from dailywalk.utils.time_utils import today_str

logger = logging.getLogger(__name__)


async def request_and_schedule_daily_reminder(
    engine: SchedulingEngine, hour: int, minute: int
) -> bool:
    """Turn on the daily reminder at hour:minute and reschedule everything.

    Returns False when notifications aren't permitted.
    """
    reminder_time = ClockTime(hour, minute)
    if not reminder_time.is_valid():
        raise ValueError(f"Invalid reminder time: {hour}:{minute}")

    await engine.repo.save_settings(
        daily_reminder_enabled=True,
        daily_reminder_time=reminder_time,
    )
    streak = await StreakCounter(engine.repo).current(today_str(engine.tz))
    logger.info(f"Legacy daily reminder requested for {reminder_time}")
    return await engine.recompute_schedule(streak)
