from datetime import time

import pytest

from sphours.core.errors import SchedulingValueError
from sphours.scenario.contract import WEEKDAYS, DayHours
from sphours.scheduling.templates import apply_pattern, copy_day_to_all, default_working_hours
from tests.records import make_record


def _working(hours):
    return [day for day in WEEKDAYS if hours[day].is_working_day]


def test_default_week_is_weekdays_nine_to_six():
    hours = default_working_hours()
    assert _working(hours) == list(WEEKDAYS[:5])
    assert hours["saturday"].start == time(9, 0)
    assert hours["monday"].end == time(18, 0)
    make_record(hours=hours)


def test_patterns_toggle_days_and_keep_times():
    closed = apply_pattern(default_working_hours(), "none")
    assert _working(closed) == []
    assert closed["monday"].start == time(9, 0)

    everyday = apply_pattern(closed, "all")
    assert _working(everyday) == list(WEEKDAYS)

    weekdays = apply_pattern(everyday, "WEEKDAYS")
    assert _working(weekdays) == list(WEEKDAYS[:5])


def test_reopening_day_with_unusable_kept_times_uses_defaults():
    hours = default_working_hours()
    hours["sunday"] = DayHours(is_working_day=False, start=time(18, 0), end=time(9, 0))
    hours["saturday"] = DayHours(is_working_day=False, start=time(11, 0))
    everyday = apply_pattern(hours, "all")
    assert (everyday["sunday"].start, everyday["sunday"].end) == (time(9, 0), time(18, 0))
    assert (everyday["saturday"].start, everyday["saturday"].end) == (time(11, 0), time(18, 0))


def test_pattern_does_not_mutate_input():
    original = default_working_hours()
    apply_pattern(original, "all")
    assert not original["sunday"].is_working_day


def test_unknown_pattern_is_rejected():
    with pytest.raises(SchedulingValueError, match="Unknown working-days pattern"):
        apply_pattern(default_working_hours(), "weekends")


def test_copy_day_to_all():
    hours = default_working_hours()
    copied = copy_day_to_all(hours, "saturday")
    assert _working(copied) == []
    with pytest.raises(SchedulingValueError):
        copy_day_to_all(hours, "holiday")
