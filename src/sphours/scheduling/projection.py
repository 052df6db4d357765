"""Working-hours projection from a resolved schedule onto weekdays."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from sphours.core.errors import ScheduleIntegrityError, SchedulingValueError
from sphours.scenario.contract import WEEKDAYS, ScheduleRecord


@dataclass(slots=True, frozen=True)
class DayProjection:
    """Hours a schedule contributes for one weekday."""

    is_working_day: bool
    start: time | None = None
    end: time | None = None

    def as_dict(self) -> dict[str, object]:
        if not self.is_working_day:
            return {"is_working_day": False}
        assert self.start is not None and self.end is not None
        return {
            "is_working_day": True,
            "start": self.start.strftime("%H:%M"),
            "end": self.end.strftime("%H:%M"),
        }


def weekday_key(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _normalise_weekday(weekday: str) -> str:
    key = weekday.strip().lower()
    if key not in WEEKDAYS:
        raise SchedulingValueError(
            f"Unknown weekday '{weekday}'. Expected one of: {', '.join(WEEKDAYS)}"
        )
    return key


def project_day(record: ScheduleRecord, weekday: str) -> DayProjection:
    """Return the hours ``record`` defines for ``weekday``.

    A record without an entry for the day is a data-integrity error; the lookup
    never substitutes base hours.
    """
    key = _normalise_weekday(weekday)
    hours = record.working_hours.get(key)
    if hours is None:
        raise ScheduleIntegrityError(
            f"Schedule {record.id} has no working_hours entry for '{key}'"
        )
    if not hours.is_working_day:
        return DayProjection(is_working_day=False)
    return DayProjection(is_working_day=True, start=hours.start, end=hours.end)


def project_date(record: ScheduleRecord, day: date) -> DayProjection:
    return project_day(record, weekday_key(day))


def project_week(record: ScheduleRecord) -> dict[str, DayProjection]:
    """Project every weekday in calendar order (Monday first)."""
    return {day: project_day(record, day) for day in WEEKDAYS}


def working_days_count(record: ScheduleRecord) -> int:
    return sum(1 for projection in project_week(record).values() if projection.is_working_day)


def period_description(record: ScheduleRecord) -> str:
    """Human-readable period, e.g. ``01.06.2025 - 31.08.2025``."""
    return f"{record.start_date:%d.%m.%Y} - {record.end_date:%d.%m.%Y}"


__all__ = [
    "DayProjection",
    "weekday_key",
    "project_day",
    "project_date",
    "project_week",
    "working_days_count",
    "period_description",
]
