"""Pydantic models describing seasonal schedule records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
PRIORITY_MIN = 0
PRIORITY_MAX = 100

LocationId = int | str
ScheduleId = int | str


class DayHours(BaseModel):
    """Working hours for one weekday of a seasonal schedule.

    Attributes
    ----------
    is_working_day:
        ``False`` closes the location for the whole day.
    start / end:
        Opening and closing time. Required on working days; kept but ignored on
        non-working days so that re-opening a day restores the previous hours.
    """

    model_config = ConfigDict(frozen=True)

    is_working_day: bool
    start: time | None = None
    end: time | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _hours_for_working_day(self) -> DayHours:
        if not self.is_working_day:
            return self
        if self.start is None or self.end is None:
            raise ValueError("DayHours.start and DayHours.end are required on working days")
        if self.start >= self.end:
            raise ValueError("DayHours.start must be earlier than DayHours.end")
        return self


class ScheduleRecord(BaseModel):
    """Date-ranged override of a location's weekly working hours.

    Attributes
    ----------
    id:
        Identifier unique within the owning location's schedule set.
    location_id:
        Owning service point (``service_point_id`` in REST payloads).
    name / description:
        Free text shown to operators; never interpreted.
    start_date / end_date:
        Inclusive calendar-date range. ``start_date == end_date`` is a valid
        single-day schedule.
    is_active:
        Inactive records are kept for history but never resolved.
    priority:
        Higher values win when active ranges overlap (``0..100``).
    working_hours:
        One :class:`DayHours` per weekday key, ``monday`` through ``sunday``.
    created_at / updated_at:
        Timestamps reported by the API; ``created_at`` orders equal-priority ties.
    """

    model_config = ConfigDict(frozen=True)

    id: ScheduleId
    location_id: LocationId = Field(
        validation_alias=AliasChoices("location_id", "service_point_id")
    )
    name: str
    description: str | None = None
    start_date: date
    end_date: date
    is_active: bool = True
    priority: int = 0
    working_hours: dict[str, DayHours]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        # Payload dates occasionally arrive as timestamps; only the day matters.
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("priority")
    @classmethod
    def _priority_in_range(cls, value: int) -> int:
        if not PRIORITY_MIN <= value <= PRIORITY_MAX:
            raise ValueError(
                f"ScheduleRecord.priority must be within [{PRIORITY_MIN}, {PRIORITY_MAX}]"
            )
        return value

    @field_validator("working_hours", mode="before")
    @classmethod
    def _complete_week(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        normalised: dict[str, object] = {}
        for key, hours in value.items():
            day = str(key).strip().lower()
            if day in normalised:
                raise ValueError(f"working_hours has duplicate entries for '{day}'")
            normalised[day] = hours
        missing = [day for day in WEEKDAYS if day not in normalised]
        if missing:
            raise ValueError(f"working_hours missing weekday entries: {', '.join(missing)}")
        unknown = sorted(set(normalised) - set(WEEKDAYS))
        if unknown:
            raise ValueError(f"working_hours has unknown weekday keys: {', '.join(unknown)}")
        return {day: normalised[day] for day in WEEKDAYS}

    @model_validator(mode="after")
    def _range_ordered(self) -> ScheduleRecord:
        if self.start_date > self.end_date:
            raise ValueError("ScheduleRecord.end_date must be >= start_date")
        return self

    def overlaps(self, start: date, end: date) -> bool:
        """Return ``True`` when the record shares at least one day with ``[start, end]``."""
        return self.start_date <= end and self.end_date >= start


__all__ = [
    "WEEKDAYS",
    "PRIORITY_MIN",
    "PRIORITY_MAX",
    "LocationId",
    "ScheduleId",
    "DayHours",
    "ScheduleRecord",
]
