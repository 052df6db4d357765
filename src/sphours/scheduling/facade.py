"""Collection facade answering effective-schedule and conflict queries for a location."""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from sphours.core.errors import ScheduleIntegrityError
from sphours.scheduling.classifier import (
    DisplayStatus,
    ScheduleStatus,
    as_reference_date,
    classify,
    display_status,
    filter_by_status,
)
from sphours.scenario.contract import LocationId, ScheduleId, ScheduleRecord
from sphours.scheduling.projection import DayProjection, project_date, weekday_key
from sphours.scheduling.resolver import (
    TieBreak,
    nearest_schedule,
    resolve_active,
    resolve_active_for_period,
)
from sphours.validation.integrity import check_schedule_integrity

_RECORD_ADAPTER = TypeAdapter(ScheduleRecord)


@dataclass(slots=True, frozen=True)
class ScheduleFilters:
    """Pre-filter hint forwarded to a source (``status`` evaluated on ``reference_date``).

    Sources may ignore it; the facade re-derives every status itself.
    """

    status: str | None = None
    reference_date: date | None = None


class ScheduleSource(Protocol):
    """Read side of the schedule API consumed by :class:`ScheduleCollection`."""

    def list_schedules(
        self, location_id: LocationId, filters: ScheduleFilters | None = None
    ) -> Sequence[ScheduleRecord | Mapping[str, Any]]: ...


class InMemoryScheduleSource:
    """Schedule source backed by already-materialised records grouped per location."""

    def __init__(self, records: Iterable[ScheduleRecord] = ()) -> None:
        self._by_location: dict[str, list[ScheduleRecord]] = defaultdict(list)
        for record in records:
            self._by_location[str(record.location_id)].append(record)

    def locations(self) -> list[str]:
        return sorted(self._by_location)

    def list_schedules(
        self, location_id: LocationId, filters: ScheduleFilters | None = None
    ) -> list[ScheduleRecord]:
        records = list(self._by_location.get(str(location_id), ()))
        if filters is None or filters.status is None:
            return records
        return filter_by_status(records, filters.status, filters.reference_date)


@dataclass(slots=True, frozen=True)
class ResolvedDay:
    """Effective hours for one location and date.

    ``schedule is None`` signals that no seasonal schedule applies and the
    location's base weekly schedule should be used.
    """

    location_id: LocationId
    date: date
    weekday: str
    schedule: ScheduleRecord | None = None
    hours: DayProjection | None = None

    @property
    def uses_base_schedule(self) -> bool:
        return self.schedule is None

    def as_dict(self) -> dict[str, Any]:
        return {
            "location_id": self.location_id,
            "date": self.date.isoformat(),
            "weekday": self.weekday,
            "uses_base_schedule": self.uses_base_schedule,
            "schedule_id": None if self.schedule is None else self.schedule.id,
            "schedule_name": None if self.schedule is None else self.schedule.name,
            "hours": None if self.hours is None else self.hours.as_dict(),
        }


@dataclass(slots=True)
class ScheduleSummary:
    """Headline figures for a location's schedule list."""

    location_id: LocationId
    reference_date: date
    total: int
    active: int
    by_status: dict[str, int] = field(default_factory=dict)
    nearest: ScheduleRecord | None = None


class ScheduleCollection:
    """Resolve seasonal schedules for locations served by a :class:`ScheduleSource`.

    Parameters
    ----------
    source:
        Collaborator returning a location's schedule records (models or raw payload
        mappings). Its errors propagate unchanged.
    tie_break:
        Ordering applied to overlapping records with equal priority.
    clock:
        Callable returning "today"; used whenever a query omits the date.
    cache:
        Memoise :meth:`effective_schedule_for` per ``(location_id, date)``. Callers
        own invalidation through :meth:`invalidate`.
    """

    def __init__(
        self,
        source: ScheduleSource,
        *,
        tie_break: TieBreak | str = TieBreak.CREATED,
        clock: Callable[[], date | datetime] = date.today,
        cache: bool = False,
    ) -> None:
        self._source = source
        self.tie_break = TieBreak(tie_break)
        self._clock = clock
        self._cache: dict[tuple[str, date], ResolvedDay] | None = {} if cache else None

    def _day(self, day: date | datetime | None) -> date:
        return as_reference_date(day if day is not None else self._clock())

    def records_for(
        self, location_id: LocationId, filters: ScheduleFilters | None = None
    ) -> list[ScheduleRecord]:
        """Fetch, coerce, and integrity-check the location's records."""
        raw = self._source.list_schedules(location_id, filters)
        records: list[ScheduleRecord] = []
        for item in raw:
            if isinstance(item, ScheduleRecord):
                records.append(item)
                continue
            try:
                records.append(_RECORD_ADAPTER.validate_python(item))
            except ValidationError as exc:
                raise ScheduleIntegrityError(
                    f"Malformed schedule payload for location {location_id}: {exc}"
                ) from exc
        check_schedule_integrity(records, location_id)
        return records

    def _resolve(
        self, location_id: LocationId, records: Sequence[ScheduleRecord], day: date
    ) -> ResolvedDay:
        winner = resolve_active(records, day, tie_break=self.tie_break)
        hours = project_date(winner, day) if winner is not None else None
        return ResolvedDay(
            location_id=location_id,
            date=day,
            weekday=weekday_key(day),
            schedule=winner,
            hours=hours,
        )

    def effective_schedule_for(
        self, location_id: LocationId, day: date | datetime | None = None
    ) -> ResolvedDay:
        """Resolve the effective schedule and its hours for ``day``."""
        target = self._day(day)
        key = (str(location_id), target)
        if self._cache is not None and key in self._cache:
            return self._cache[key]
        records = self.records_for(
            location_id, ScheduleFilters(status=ScheduleStatus.CURRENT.value, reference_date=target)
        )
        resolved = self._resolve(location_id, records, target)
        if self._cache is not None:
            self._cache[key] = resolved
        return resolved

    def effective_week(
        self, location_id: LocationId, week_start: date | datetime | None = None
    ) -> list[ResolvedDay]:
        """Resolve seven consecutive days starting at ``week_start``."""
        start = self._day(week_start)
        records = self.records_for(location_id)
        return [self._resolve(location_id, records, start + timedelta(days=offset)) for offset in range(7)]

    def find_conflicts(
        self,
        location_id: LocationId,
        start: date,
        end: date,
        excluding_id: ScheduleId | None = None,
    ) -> list[ScheduleRecord]:
        """Active records overlapping ``[start, end]``, minus the one being edited.

        The result only informs the caller; nothing here blocks a save.
        """
        records = self.records_for(location_id, ScheduleFilters(status="active"))
        overlapping = resolve_active_for_period(records, start, end)
        if excluding_id is None:
            return overlapping
        return [record for record in overlapping if str(record.id) != str(excluding_id)]

    def classify(self, record: ScheduleRecord, day: date | datetime | None = None) -> ScheduleStatus:
        return classify(record, self._day(day))

    def nearest_schedule(
        self, location_id: LocationId, day: date | datetime | None = None
    ) -> ScheduleRecord | None:
        return nearest_schedule(
            self.records_for(location_id), self._day(day), tie_break=self.tie_break
        )

    def summary(self, location_id: LocationId, day: date | datetime | None = None) -> ScheduleSummary:
        target = self._day(day)
        records = self.records_for(location_id)
        counts = Counter(display_status(record, target).value for record in records)
        return ScheduleSummary(
            location_id=location_id,
            reference_date=target,
            total=len(records),
            active=sum(1 for record in records if record.is_active),
            by_status={status.value: counts.get(status.value, 0) for status in DisplayStatus},
            nearest=nearest_schedule(records, target, tie_break=self.tie_break),
        )

    def invalidate(self, location_id: LocationId | None = None) -> None:
        """Drop cached resolutions for one location, or all of them."""
        if self._cache is None:
            return
        if location_id is None:
            self._cache.clear()
            return
        wanted = str(location_id)
        for key in [key for key in self._cache if key[0] == wanted]:
            del self._cache[key]


__all__ = [
    "ScheduleFilters",
    "ScheduleSource",
    "InMemoryScheduleSource",
    "ResolvedDay",
    "ScheduleSummary",
    "ScheduleCollection",
]
