"""Active-schedule resolution over overlapping, prioritised seasonal schedules.

Resolution policy
-----------------
1. Inactive records never take part.
2. Only records whose inclusive range covers the reference date are candidates.
3. The highest ``priority`` wins.
4. Equal priorities fall back to a total order so repeated calls agree no matter
   how the API ordered the payload. With :attr:`TieBreak.CREATED` (the default)
   the most recently created record wins; records without ``created_at`` rank as
   the oldest. The record id is the final discriminator (larger wins, integer ids
   before string ids).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum

from sphours.core.errors import SchedulingValueError
from sphours.scheduling.classifier import ScheduleStatus, as_reference_date, classify
from sphours.scenario.contract import ScheduleId, ScheduleRecord


class TieBreak(str, Enum):
    """Ordering used when overlapping records share a priority."""

    CREATED = "created"
    UPDATED = "updated"
    ID = "id"


def _id_rank(value: ScheduleId) -> tuple[int, int | str]:
    if isinstance(value, int):
        return (1, value)
    return (0, value)


def _timestamp_rank(value: datetime | None) -> tuple[int, float]:
    if value is None:
        return (0, 0.0)
    return (1, value.timestamp())


def tie_break_key(
    record: ScheduleRecord, tie_break: TieBreak = TieBreak.CREATED
) -> tuple[object, ...]:
    """Sort key where the greater value is the preferred record."""
    policy = TieBreak(tie_break)
    if policy is TieBreak.CREATED:
        return (record.priority, _timestamp_rank(record.created_at), _id_rank(record.id))
    if policy is TieBreak.UPDATED:
        return (record.priority, _timestamp_rank(record.updated_at), _id_rank(record.id))
    return (record.priority, _id_rank(record.id))


def resolve_active(
    records: Iterable[ScheduleRecord],
    reference_date: date | datetime | None = None,
    *,
    tie_break: TieBreak = TieBreak.CREATED,
) -> ScheduleRecord | None:
    """Return the effective schedule on ``reference_date`` or ``None``.

    ``None`` means the location's base weekly schedule applies. Records are
    assumed well formed; the collection facade checks integrity beforehand.
    """
    today = as_reference_date(reference_date)
    candidates = [
        record
        for record in records
        if record.is_active and classify(record, today) is ScheduleStatus.CURRENT
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda record: tie_break_key(record, tie_break))


def resolve_active_for_period(
    records: Iterable[ScheduleRecord], start: date, end: date
) -> list[ScheduleRecord]:
    """Return every active record intersecting ``[start, end]``, regardless of priority."""
    if start > end:
        raise SchedulingValueError(f"Period start {start} is after period end {end}")
    overlapping = [record for record in records if record.is_active and record.overlaps(start, end)]
    return sorted(overlapping, key=lambda record: (record.start_date, _id_rank(record.id)))


def nearest_schedule(
    records: Iterable[ScheduleRecord],
    reference_date: date | datetime | None = None,
    *,
    tie_break: TieBreak = TieBreak.CREATED,
) -> ScheduleRecord | None:
    """Return the current winner, else the soonest upcoming active record."""
    today = as_reference_date(reference_date)
    pool = [record for record in records if record.is_active]
    current = resolve_active(pool, today, tie_break=tie_break)
    if current is not None:
        return current
    upcoming = [record for record in pool if classify(record, today) is ScheduleStatus.UPCOMING]
    if not upcoming:
        return None
    soonest = min(record.start_date for record in upcoming)
    starting = [record for record in upcoming if record.start_date == soonest]
    return max(starting, key=lambda record: tie_break_key(record, tie_break))


__all__ = [
    "TieBreak",
    "tie_break_key",
    "resolve_active",
    "resolve_active_for_period",
    "nearest_schedule",
]
