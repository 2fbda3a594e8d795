"""Per-day and per-week notification caps for a single recompute pass."""

from collections import defaultdict

from dailywalk.utils.constants import MAX_PER_DAY, MAX_PER_DAY_AT_RISK, MAX_PER_WEEK


class BudgetAllocator:
    """Hands out notification slots until a cap is hit.

    Lives for one recompute pass. Today gets one extra slot when the streak
    is at risk so the final warning still fits.
    """

    def __init__(
        self,
        today: str,
        streak_at_risk: bool,
        per_day: int = MAX_PER_DAY,
        per_day_at_risk: int = MAX_PER_DAY_AT_RISK,
        per_week: int = MAX_PER_WEEK,
    ):
        self.today = today
        self.streak_at_risk = streak_at_risk
        self.per_day = per_day
        self.per_day_at_risk = per_day_at_risk
        self.per_week = per_week
        self._by_day: defaultdict[str, int] = defaultdict(int)
        self._total = 0

    def cap_for(self, date_str: str) -> int:
        if date_str == self.today and self.streak_at_risk:
            return self.per_day_at_risk
        return self.per_day

    @property
    def total(self) -> int:
        return self._total

    @property
    def week_exhausted(self) -> bool:
        return self._total >= self.per_week

    def placed_on(self, date_str: str) -> int:
        return self._by_day.get(date_str, 0)

    def try_place(self, date_str: str) -> bool:
        """Reserve a slot on date_str if both caps allow it."""
        if self.week_exhausted:
            return False
        if self._by_day[date_str] >= self.cap_for(date_str):
            return False
        self._by_day[date_str] += 1
        self._total += 1
        return True
