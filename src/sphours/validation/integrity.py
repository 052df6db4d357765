"""Precondition checks for schedule records handed to the collection facade."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations
from typing import List

from sphours.core.errors import ScheduleIntegrityError
from sphours.scenario.contract import WEEKDAYS, LocationId, ScheduleRecord


def _record_problems(record: ScheduleRecord) -> list[str]:
    problems: list[str] = []
    if record.start_date > record.end_date:
        problems.append(
            f"start_date {record.start_date} is after end_date {record.end_date}"
        )
    missing = [day for day in WEEKDAYS if day not in record.working_hours]
    if missing:
        problems.append(f"working_hours missing {', '.join(missing)}")
    return problems


def check_schedule_integrity(
    records: Sequence[ScheduleRecord], location_id: LocationId | None = None
) -> None:
    """Raise :class:`ScheduleIntegrityError` if any record is malformed.

    Models built through the Pydantic constructor already satisfy the per-record
    rules; records created with ``model_construct`` or mutated copies do not, so
    the checks are repeated here along with the collection-level ones (unique ids,
    single owning location).
    """
    errors: List[str] = []
    seen: set[str] = set()
    for record in records:
        for problem in _record_problems(record):
            errors.append(f"Schedule {record.id}: {problem}")
        if location_id is not None and str(record.location_id) != str(location_id):
            errors.append(
                f"Schedule {record.id}: belongs to location {record.location_id}, not {location_id}"
            )
        key = str(record.id)
        if key in seen:
            errors.append(f"Schedule {record.id}: duplicate id")
        seen.add(key)
    if errors:
        raise ScheduleIntegrityError("; ".join(errors))


def priority_tie_warnings(records: Sequence[ScheduleRecord]) -> list[str]:
    """Describe active, overlapping record pairs that share a priority."""
    warnings: List[str] = []
    active = [record for record in records if record.is_active]
    for first, second in combinations(active, 2):
        if first.priority != second.priority:
            continue
        if not first.overlaps(second.start_date, second.end_date):
            continue
        warnings.append(
            f"Schedules {first.id} and {second.id} overlap with equal priority "
            f"{first.priority}; the tie-break policy decides between them"
        )
    return warnings


__all__ = ["check_schedule_integrity", "priority_tie_warnings"]
