"""Daily completion handling."""

import logging
from datetime import datetime, timedelta

from dailywalk.db.models import ScheduledNotification, notification_id, parse_notification_id
from dailywalk.engine.copy_catalog import text_for
from dailywalk.engine.notifier import SchedulingError
from dailywalk.engine.scheduler import SchedulingEngine
from dailywalk.utils.constants import (
    CATEGORY_CHANNELS,
    MILESTONE_DELAY_SECONDS,
    MILESTONES,
    SAME_DAY_CATEGORIES,
)
from dailywalk.utils.time_utils import today_str, utc_now

logger = logging.getLogger(__name__)


def is_milestone(streak_count: int) -> bool:
    return streak_count in MILESTONES


class CompletionTracker:
    """Reacts to the user finishing today's walk."""

    def __init__(self, engine: SchedulingEngine):
        self.engine = engine

    @property
    def repo(self):
        return self.engine.repo

    @property
    def notifier(self):
        return self.engine.notifier

    async def on_daily_completion(self, streak_count: int, now: datetime | None = None) -> None:
        """Record today's completion and reshape the schedule around it.

        1. Store today as the last completion date
        2. Cancel nudges, reflections, streak warnings and re-engagement
           notifications that are now pointless
        3. Celebrate milestone streaks
        4. Recompute the rest of the horizon
        """
        if now is None:
            now = utc_now()
        today = today_str(self.engine.tz, now)
        repeat = await self.repo.get_last_completion_date() == today

        await self.repo.set_last_completion_date(today)
        logger.info(f"Daily walk completed on {today} (streak {streak_count})")

        await self._cancel_same_day()

        # A repeat completion on the same day never celebrates again
        if is_milestone(streak_count) and not repeat:
            await self._celebrate(streak_count, today, now)

        await self.engine.recompute_schedule(streak_count, now)

    async def _cancel_same_day(self) -> None:
        cancelled = 0
        for identifier in await self.notifier.list_scheduled():
            category, _ = parse_notification_id(identifier)
            if category not in SAME_DAY_CATEGORIES:
                continue
            try:
                await self.notifier.cancel(identifier)
                cancelled += 1
            except Exception as e:
                logger.debug(f"Ignoring failed cancel of {identifier}: {e}")

        if cancelled:
            logger.info(f"Cancelled {cancelled} same-day notifications")

    async def _celebrate(self, streak_count: int, today: str, now: datetime) -> None:
        text = text_for("milestone", "", f"{today}:{streak_count}", streak_count)
        notification = ScheduledNotification(
            identifier=notification_id("milestone", today, streak_count),
            category="milestone",
            title=text.title,
            body=text.body,
            fire_at=now + timedelta(seconds=MILESTONE_DELAY_SECONDS),
            channel=CATEGORY_CHANNELS["milestone"],
        )
        try:
            await self.notifier.schedule(notification)
            logger.info(f"Scheduled {streak_count}-day milestone celebration")
        except SchedulingError as e:
            logger.error(f"Failed to schedule milestone {notification.identifier}: {e}")
