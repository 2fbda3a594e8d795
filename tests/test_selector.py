"""Tests for deterministic selection."""

from dailywalk.engine.selector import pick_days, pick_time, pick_variant, rolling_hash


def test_rolling_hash_known_values():
    assert rolling_hash("") == 0
    assert rolling_hash("a") == 97
    assert rolling_hash("ab") == 97 * 31 + 98


def test_rolling_hash_wraps_to_non_negative():
    for seed in ("midday:2026-03-02", "x" * 200, "reengage_weekly:2026-12-31"):
        h = rolling_hash(seed)
        assert 0 <= h <= 2**31


def test_pick_days_is_deterministic():
    first = pick_days(7, 3, "2024-05-01")
    second = pick_days(7, 3, "2024-05-01")

    assert first == second
    assert len(first) == 3
    assert len(set(first)) == 3
    assert all(0 <= d < 7 for d in first)
    assert first == sorted(first)


def test_pick_days_clamps_count():
    assert pick_days(7, 0, "seed") == []
    assert pick_days(7, -1, "seed") == []
    assert pick_days(7, 7, "seed") == list(range(7))
    assert pick_days(7, 10, "seed") == list(range(7))


def test_pick_days_varies_with_seed():
    picks = {tuple(pick_days(7, 3, f"midday:2026-03-{day:02d}")) for day in range(1, 29)}
    assert len(picks) > 1


def test_pick_time_stays_in_midday_window():
    for day in range(1, 29):
        hour, minute = pick_time(f"midday:2026-03-{day:02d}")
        assert 12 <= hour <= 13
        assert 0 <= minute < 59


def test_pick_variant_uses_custom_hash():
    bucket = ["a", "b", "c"]
    assert pick_variant(bucket, "anything", hash_fn=lambda s: 4) == "b"
    assert pick_variant(bucket, "seed") == pick_variant(bucket, "seed")
