"""Scheduling engine - recomputes the rolling 7-day notification set."""

import asyncio
import logging
from datetime import datetime, timedelta

from dailywalk.db.models import (
    ClockTime,
    NotificationSettings,
    ScheduledNotification,
    notification_id,
)
from dailywalk.db.repository import Repository
from dailywalk.engine.budget import BudgetAllocator
from dailywalk.engine.copy_catalog import text_for
from dailywalk.engine.notifier import Notifier, SchedulingError
from dailywalk.engine.selector import pick_days, pick_time
from dailywalk.utils.constants import (
    CATEGORY_CHANNELS,
    DEFAULT_TIMEZONE,
    HORIZON_DAYS,
    REENGAGE_HOUR,
    REENGAGE_MINUTE,
    REENGAGE_WEEKLY_COUNT,
    REMINDER_EXPIRY_MARGIN_MINUTES,
    STREAK_LADDER,
)
from dailywalk.utils.time_utils import (
    DEFAULT_PROBE_HOURS,
    add_days,
    date_at,
    days_between,
    local_date,
    today_str,
    utc_now,
)

logger = logging.getLogger(__name__)


def effective_reminder_time(reminder: ClockTime, expiry: ClockTime) -> ClockTime:
    """Pull the daily reminder back before streak expiry.

    A reminder at or after the expiry time moves to two hours before it,
    never earlier than midnight.
    """
    if reminder.minutes < expiry.minutes:
        return reminder
    return ClockTime.from_minutes(max(0, expiry.minutes - REMINDER_EXPIRY_MARGIN_MINUTES))


def is_streak_at_risk(
    settings: NotificationSettings, completed_today: bool, streak_count: int
) -> bool:
    return not completed_today and settings.streak_protection_enabled and streak_count > 0


class SchedulePlanner:
    """Builds the notification set for one pass. No I/O."""

    def __init__(
        self,
        settings: NotificationSettings,
        streak_count: int,
        today: str,
        last_completion: str | None,
        now: datetime,
        tz: str,
        probe_hours: range = DEFAULT_PROBE_HOURS,
    ):
        self.settings = settings
        self.streak_count = streak_count
        self.today = today
        self.last_completion = last_completion
        self.now = now
        self.tz = tz
        self.probe_hours = probe_hours

        self.completed_today = last_completion == today
        self.streak_at_risk = is_streak_at_risk(settings, self.completed_today, streak_count)
        self.budget = BudgetAllocator(today, self.streak_at_risk)
        self.planned: list[ScheduledNotification] = []

    def _at(self, date_str: str, clock: ClockTime) -> datetime:
        return date_at(date_str, clock.hour, clock.minute, self.tz, self.probe_hours)

    def _place(
        self,
        category: str,
        date_str: str,
        fire_at: datetime,
        disambiguator: int | None = None,
    ) -> bool:
        """Add one notification if it is in the future and fits the budget."""
        identifier = notification_id(category, date_str, disambiguator)

        if fire_at <= self.now:
            logger.debug(f"Skipping {identifier}: fire time already passed")
            return False

        if not self.budget.try_place(local_date(fire_at, self.tz)):
            logger.debug(f"Skipping {identifier}: over budget")
            return False

        text = text_for(category, self.settings.tone_preference, date_str, self.streak_count)
        self.planned.append(
            ScheduledNotification(
                identifier=identifier,
                category=category,  # type: ignore
                title=text.title,
                body=text.body,
                fire_at=fire_at,
                channel=CATEGORY_CHANNELS[category],
            )
        )
        return True

    def build(self) -> list[ScheduledNotification]:
        settings = self.settings
        nudge_offsets = set(
            pick_days(HORIZON_DAYS, settings.midday_nudge_days_per_week, f"midday:{self.today}")
        )
        reminder_time = effective_reminder_time(
            settings.daily_reminder_time, settings.streak_expiry_time
        )

        # Earlier categories claim slots first
        for offset in range(HORIZON_DAYS):
            day = add_days(self.today, offset)
            if offset == 0 and self.completed_today:
                continue

            if settings.daily_reminder_enabled:
                self._place("daily_reminder", day, self._at(day, reminder_time))

            if settings.midday_nudge_enabled and offset in nudge_offsets:
                hour, minute = pick_time(f"midday:{day}")
                self._place("midday_nudge", day, self._at(day, ClockTime(hour, minute)))

            if settings.evening_reflection_enabled:
                self._place(
                    "evening_reflection", day, self._at(day, settings.evening_reflection_time)
                )

            if settings.streak_protection_enabled and self.streak_count > 0:
                expiry = self._at(day, settings.streak_expiry_time)
                for category, minutes_before, min_streak in STREAK_LADDER:
                    if self.streak_count < min_streak:
                        continue
                    self._place(category, day, expiry - timedelta(minutes=minutes_before))

        if settings.reengagement_enabled and self.last_completion and not self.completed_today:
            self._plan_reengagement(self.last_completion)

        return self.planned

    def _plan_reengagement(self, last: str) -> None:
        inactive = days_between(last, self.today)
        evening = ClockTime(REENGAGE_HOUR, REENGAGE_MINUTE)

        if inactive == 2:
            self._place("reengage_2d", self.today, self._at(self.today, evening))
        elif 3 <= inactive <= 5:
            day = add_days(last, 5)
            self._place("reengage_5d", day, self._at(day, evening))
        elif inactive >= 7:
            for week in range(1, REENGAGE_WEEKLY_COUNT + 1):
                if self.budget.week_exhausted:
                    break
                day = add_days(last, 7 * week)
                self._place("reengage_weekly", day, self._at(day, evening), disambiguator=week)


class SchedulingEngine:
    """Keeps the notifier's schedule in line with settings and progress.

    Every pass cancels what the previous pass scheduled, then rebuilds the
    full horizon, so running it again with the same inputs converges on the
    same set. Passes are serialized; a trigger that arrives mid-pass waits
    for it to finish.
    """

    def __init__(
        self,
        repo: Repository,
        notifier: Notifier,
        tz: str = DEFAULT_TIMEZONE,
        probe_hours: range = DEFAULT_PROBE_HOURS,
    ):
        self.repo = repo
        self.notifier = notifier
        self.tz = tz
        self.probe_hours = probe_hours
        self.last_plan: list[ScheduledNotification] = []
        self._lock = asyncio.Lock()

    async def recompute_schedule(self, streak_count: int, now: datetime | None = None) -> bool:
        """Rebuild the schedule. Returns False if notifications aren't permitted."""
        async with self._lock:
            return await self._recompute(streak_count, now)

    async def _recompute(self, streak_count: int, now: datetime | None) -> bool:
        if now is None:
            now = utc_now()

        if not await self.notifier.request_permission():
            logger.info("Notification permission denied, schedule left as is")
            return False

        await self._cancel_owned()

        settings = await self.repo.get_settings()
        completion = await self.repo.get_completion_record()
        today = today_str(self.tz, now)

        planner = SchedulePlanner(
            settings,
            streak_count,
            today,
            completion.last_completion_date,
            now,
            self.tz,
            self.probe_hours,
        )
        plan = planner.build()

        accepted = []
        scheduled = []
        try:
            for notification in plan:
                try:
                    await self.notifier.schedule(notification)
                except SchedulingError as e:
                    logger.error(f"Failed to schedule {notification.identifier}: {e}")
                    continue
                accepted.append(notification.identifier)
                scheduled.append(notification)
        finally:
            # Whatever reached the notifier must stay cancellable next pass
            await self.repo.set_scheduled_ids(accepted)
            self.last_plan = scheduled

        logger.info(
            f"Recomputed schedule for {today}: {len(accepted)} notifications "
            f"(streak {streak_count}, at risk: {planner.streak_at_risk})"
        )
        return True

    async def _cancel_owned(self) -> None:
        """Cancel everything from the previous pass plus legacy single ids."""
        owned = await self.repo.get_scheduled_ids()
        owned.extend(await self.repo.pop_legacy_ids())

        for identifier in owned:
            try:
                await self.notifier.cancel(identifier)
            except Exception as e:
                logger.debug(f"Ignoring failed cancel of stale id {identifier}: {e}")

        await self.repo.set_scheduled_ids([])
