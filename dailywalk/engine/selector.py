"""Seeded, repeatable pseudo-random selection.

Everything here is a pure function of its seed, so recomputing a schedule
picks the same days, times and copy every time.
"""

from typing import Callable, Sequence, TypeVar

from dailywalk.utils.constants import MIDDAY_WINDOW_HOURS, MIDDAY_WINDOW_START_HOUR

T = TypeVar("T")

SeedHash = Callable[[str], int]


def rolling_hash(seed: str) -> int:
    """Rolling multiply-add hash over character codes.

    Same arithmetic as the 32-bit `h = (h << 5) - h + code` string hash:
    wrapped to a signed 32-bit value, then made non-negative.
    """
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def pick_days(total: int, count: int, seed: str, hash_fn: SeedHash = rolling_hash) -> list[int]:
    """Pick `count` distinct indices from range(total), sorted."""
    pool = list(range(total))
    count = max(0, min(count, total))
    picked = []
    for i in range(count):
        idx = hash_fn(f"{seed}:{i}") % len(pool)
        picked.append(pool.pop(idx))
    return sorted(picked)


def pick_time(seed: str, hash_fn: SeedHash = rolling_hash) -> tuple[int, int]:
    """Pick (hour, minute) inside the midday window."""
    h = hash_fn(seed)
    hour = MIDDAY_WINDOW_START_HOUR + h % MIDDAY_WINDOW_HOURS
    minute = (h // MIDDAY_WINDOW_HOURS) % 59
    return hour, minute


def pick_variant(bucket: Sequence[T], seed: str, hash_fn: SeedHash = rolling_hash) -> T:
    if not bucket:
        raise ValueError("Cannot pick from an empty bucket")
    return bucket[hash_fn(seed) % len(bucket)]
