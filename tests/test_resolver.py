from datetime import date, datetime

import pytest

from sphours.core.errors import SchedulingValueError
from sphours.scheduling.resolver import (
    TieBreak,
    nearest_schedule,
    resolve_active,
    resolve_active_for_period,
)
from tests.records import make_record

DAY = date(2025, 2, 8)


def test_no_candidates_resolves_to_none():
    past = make_record(1, start="2024-01-01", end="2024-12-31")
    future = make_record(2, start="2025-03-01", end="2025-03-31")
    assert resolve_active([], DAY) is None
    assert resolve_active([past], DAY) is None
    assert resolve_active([future], DAY) is None
    assert resolve_active([past, future], DAY) is None


def test_inactive_records_never_win():
    base = make_record(1, start="2025-01-01", end="2025-03-31", priority=10)
    disabled = make_record(2, start="2025-02-01", end="2025-02-14", priority=90, is_active=False)
    assert resolve_active([base, disabled], DAY) == base


@pytest.mark.parametrize("reverse", [False, True])
def test_highest_priority_wins_regardless_of_order(reverse):
    low = make_record(1, start="2025-01-01", end="2025-03-31", priority=10)
    high = make_record(2, start="2025-02-01", end="2025-02-14", priority=50)
    records = [high, low] if reverse else [low, high]
    assert resolve_active(records, DAY) == high


@pytest.mark.parametrize("reverse", [False, True])
def test_equal_priority_prefers_most_recently_created(reverse):
    older = make_record(1, start="2025-02-01", end="2025-02-28", created_at="2025-01-01T08:00:00")
    newer = make_record(2, start="2025-02-01", end="2025-02-28", created_at="2025-01-15T08:00:00")
    records = [newer, older] if reverse else [older, newer]
    first = resolve_active(records, DAY)
    assert first == newer
    assert all(resolve_active(records, DAY) is first for _ in range(5))


def test_missing_created_at_ranks_as_oldest():
    undated = make_record(9, start="2025-02-01", end="2025-02-28")
    dated = make_record(1, start="2025-02-01", end="2025-02-28", created_at="2024-01-01T00:00:00")
    assert resolve_active([undated, dated], DAY) == dated


def test_identical_timestamps_fall_back_to_largest_id():
    stamp = datetime(2025, 1, 1, 12, 0)
    first = make_record(3, start="2025-02-01", end="2025-02-28", created_at=stamp)
    second = make_record(11, start="2025-02-01", end="2025-02-28", created_at=stamp)
    assert resolve_active([second, first], DAY) == second
    assert resolve_active([first, second], DAY) == second


def test_alternative_tie_break_policies():
    edited = make_record(
        1,
        start="2025-02-01",
        end="2025-02-28",
        created_at="2024-01-01T00:00:00",
        updated_at="2025-01-30T00:00:00",
    )
    fresh = make_record(
        2,
        start="2025-02-01",
        end="2025-02-28",
        created_at="2025-01-10T00:00:00",
        updated_at="2025-01-10T00:00:00",
    )
    records = [edited, fresh]
    assert resolve_active(records, DAY) == fresh
    assert resolve_active(records, DAY, tie_break=TieBreak.UPDATED) == edited
    assert resolve_active(records, DAY, tie_break="id") == fresh


def test_priority_dominates_tie_break():
    old_high = make_record(1, start="2025-02-01", end="2025-02-28", priority=60, created_at="2020-01-01T00:00:00")
    new_low = make_record(2, start="2025-02-01", end="2025-02-28", priority=59, created_at="2025-01-01T00:00:00")
    assert resolve_active([new_low, old_high], DAY) == old_high


def test_period_returns_every_overlapping_active_record():
    partial = make_record(1, start="2025-06-15", end="2025-07-15", priority=5)
    outside = make_record(2, start="2025-07-01", end="2025-07-31", priority=90)
    enclosing = make_record(3, start="2025-05-01", end="2025-09-30", priority=1)
    disabled = make_record(4, start="2025-06-01", end="2025-06-30", is_active=False)
    found = resolve_active_for_period(
        [partial, outside, enclosing, disabled], date(2025, 6, 1), date(2025, 6, 30)
    )
    assert found == [enclosing, partial]


def test_period_rejects_inverted_range():
    with pytest.raises(SchedulingValueError, match="is after period end"):
        resolve_active_for_period([], date(2025, 7, 1), date(2025, 6, 1))


def test_nearest_prefers_current_then_soonest_upcoming():
    current = make_record(1, start="2025-02-01", end="2025-02-28")
    later = make_record(2, start="2025-05-01", end="2025-05-31")
    sooner = make_record(3, start="2025-03-01", end="2025-03-31")
    expired = make_record(4, start="2024-01-01", end="2024-01-31")
    hidden = make_record(5, start="2025-02-15", end="2025-02-20", is_active=False)

    assert nearest_schedule([current, later, sooner], DAY) == current
    assert nearest_schedule([later, sooner, expired, hidden], DAY) == sooner
    assert nearest_schedule([expired], DAY) is None
