"""Schedule record contract models (Pydantic schemas, validators)."""

from .models import (
    PRIORITY_MAX,
    PRIORITY_MIN,
    WEEKDAYS,
    DayHours,
    LocationId,
    ScheduleId,
    ScheduleRecord,
)

__all__ = [
    "WEEKDAYS",
    "PRIORITY_MIN",
    "PRIORITY_MAX",
    "LocationId",
    "ScheduleId",
    "DayHours",
    "ScheduleRecord",
]
