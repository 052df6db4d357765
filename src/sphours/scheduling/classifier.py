"""Lifecycle classification of seasonal schedules relative to a reference date."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum

from sphours.core.errors import SchedulingValueError
from sphours.scenario.contract import ScheduleRecord


class ScheduleStatus(str, Enum):
    """Date-derived lifecycle status; independent of ``is_active``."""

    CURRENT = "current"
    UPCOMING = "upcoming"
    PAST = "past"


class DisplayStatus(str, Enum):
    """Status shown in schedule listings, where deactivation masks the date status."""

    CURRENT = "current"
    UPCOMING = "upcoming"
    PAST = "past"
    INACTIVE = "inactive"


STATUS_FILTERS: tuple[str, ...] = ("active", "inactive", "current", "upcoming", "past")


def as_reference_date(value: date | datetime | None = None) -> date:
    """Truncate ``value`` to day precision, defaulting to today."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def classify(record: ScheduleRecord, reference_date: date | datetime | None = None) -> ScheduleStatus:
    """Classify ``record`` as current, upcoming, or past on ``reference_date``.

    Both bounds are inclusive: a schedule that starts or ends on the reference
    date is ``current``.
    """
    today = as_reference_date(reference_date)
    if record.start_date <= today <= record.end_date:
        return ScheduleStatus.CURRENT
    if record.start_date > today:
        return ScheduleStatus.UPCOMING
    return ScheduleStatus.PAST


def display_status(
    record: ScheduleRecord, reference_date: date | datetime | None = None
) -> DisplayStatus:
    """Return ``inactive`` for deactivated records, otherwise the date status."""
    if not record.is_active:
        return DisplayStatus.INACTIVE
    return DisplayStatus(classify(record, reference_date).value)


def filter_by_status(
    records: Iterable[ScheduleRecord],
    status: str,
    reference_date: date | datetime | None = None,
) -> list[ScheduleRecord]:
    """Apply one of the listing filters (``active``, ``inactive``, ``current``, ...).

    Date statuses only match active records, mirroring the listing endpoint.
    """
    key = status.strip().lower()
    if key not in STATUS_FILTERS:
        raise SchedulingValueError(
            f"Unknown status filter '{status}'. Allowed: {', '.join(STATUS_FILTERS)}"
        )
    if key == "active":
        return [record for record in records if record.is_active]
    if key == "inactive":
        return [record for record in records if not record.is_active]
    today = as_reference_date(reference_date)
    return [
        record
        for record in records
        if record.is_active and classify(record, today).value == key
    ]


__all__ = [
    "ScheduleStatus",
    "DisplayStatus",
    "STATUS_FILTERS",
    "as_reference_date",
    "classify",
    "display_status",
    "filter_by_status",
]
