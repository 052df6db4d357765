"""Working-hours presets used when drafting a new seasonal schedule."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import time

from sphours.core.errors import SchedulingValueError
from sphours.scenario.contract import WEEKDAYS, DayHours

DEFAULT_OPEN = time(9, 0)
DEFAULT_CLOSE = time(18, 0)
WEEKEND: frozenset[str] = frozenset({"saturday", "sunday"})

PATTERN_DESCRIPTIONS: dict[str, str] = {
    "weekdays": "Open Monday to Friday, closed at the weekend.",
    "all": "Open every day of the week.",
    "none": "Closed every day of the week.",
}


def default_working_hours() -> dict[str, DayHours]:
    """Monday-Friday 09:00-18:00; weekend closed with the same hours kept on file."""
    return {
        day: DayHours(is_working_day=day not in WEEKEND, start=DEFAULT_OPEN, end=DEFAULT_CLOSE)
        for day in WEEKDAYS
    }


def _reopen(hours: DayHours) -> DayHours:
    start = hours.start or DEFAULT_OPEN
    end = hours.end or DEFAULT_CLOSE
    # Times kept on a closed day are never validated; fall back when they are unusable.
    if start >= end:
        start, end = DEFAULT_OPEN, DEFAULT_CLOSE
    return DayHours(is_working_day=True, start=start, end=end)


def apply_pattern(hours: Mapping[str, DayHours], pattern: str) -> dict[str, DayHours]:
    """Toggle working days according to ``pattern`` keeping each day's times."""
    key = pattern.strip().lower()
    if key not in PATTERN_DESCRIPTIONS:
        raise SchedulingValueError(
            f"Unknown working-days pattern '{pattern}'. Available: {', '.join(sorted(PATTERN_DESCRIPTIONS))}"
        )
    updated: dict[str, DayHours] = {}
    for day in WEEKDAYS:
        current = hours[day]
        working = key == "all" or (key == "weekdays" and day not in WEEKEND)
        if working:
            updated[day] = _reopen(current)
        else:
            updated[day] = current.model_copy(update={"is_working_day": False})
    return updated


def copy_day_to_all(hours: Mapping[str, DayHours], source_day: str) -> dict[str, DayHours]:
    """Replicate ``source_day``'s entry onto every weekday."""
    key = source_day.strip().lower()
    if key not in WEEKDAYS:
        raise SchedulingValueError(f"Unknown weekday '{source_day}'")
    source = hours[key]
    return {day: source for day in WEEKDAYS}


__all__ = [
    "DEFAULT_OPEN",
    "DEFAULT_CLOSE",
    "PATTERN_DESCRIPTIONS",
    "default_working_hours",
    "apply_pattern",
    "copy_day_to_all",
]
