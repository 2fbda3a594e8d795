"""Streak counting."""

import logging

from dailywalk.db.models import StreakState
from dailywalk.db.repository import Repository
from dailywalk.utils.time_utils import add_days

logger = logging.getLogger(__name__)


def advance_streak(streak: StreakState, today: str) -> StreakState:
    """Return the streak after an activity on `today`.

    - Already active today: unchanged
    - Active yesterday: +1
    - Anything older (or never): starts over at 1
    """
    if streak.last_activity_date == today:
        return streak

    if streak.last_activity_date == add_days(today, -1):
        current = streak.current_streak + 1
    else:
        current = 1

    return StreakState(
        current_streak=current,
        longest_streak=max(streak.longest_streak, current),
        last_activity_date=today,
    )


def displayed_streak(streak: StreakState, today: str) -> int:
    """Current streak, or 0 once a whole day has been missed."""
    if streak.last_activity_date in (today, add_days(today, -1)):
        return streak.current_streak
    return 0


class StreakCounter:
    """Stored streak for this install."""

    def __init__(self, repo: Repository):
        self.repo = repo

    async def record_activity(self, today: str) -> StreakState:
        streak = await self.repo.get_streak()
        updated = advance_streak(streak, today)
        if updated is not streak:
            await self.repo.save_streak(updated)
            logger.info(f"Streak now {updated.current_streak} (longest {updated.longest_streak})")
        return updated

    async def current(self, today: str) -> int:
        return displayed_streak(await self.repo.get_streak(), today)
