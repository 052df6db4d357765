"""Schedule bundle loading utilities (YAML metadata + optional CSV table)."""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import pandas as pd
import yaml
from pydantic import TypeAdapter

from sphours.core.errors import SchedulingValueError
from sphours.scenario.contract import WEEKDAYS, ScheduleRecord
from sphours.scheduling.facade import InMemoryScheduleSource, ScheduleCollection
from sphours.scheduling.resolver import TieBreak
from sphours.validation.integrity import check_schedule_integrity, priority_tie_warnings

__all__ = ["ScheduleBundle", "load_bundle", "read_csv", "parse_day_hours"]

_CLOSED_TOKENS = {"closed", "off", "none", "-", "non-working", "false"}
_OPTIONAL_FIELDS = ("description", "is_active", "priority", "created_at", "updated_at")
_INT_TAG = "tag:yaml.org,2002:int"


@dataclass(slots=True)
class ScheduleBundle:
    """Locations and seasonal schedules read from a bundle file."""

    name: str
    path: Path
    locations: dict[str, str]
    records: list[ScheduleRecord]
    tie_break: TieBreak = TieBreak.CREATED
    warnings: list[str] = field(default_factory=list)

    def records_for(self, location_id: object) -> list[ScheduleRecord]:
        return [record for record in self.records if str(record.location_id) == str(location_id)]

    def source(self) -> InMemoryScheduleSource:
        return InMemoryScheduleSource(self.records)

    def collection(self, **kwargs: Any) -> ScheduleCollection:
        kwargs.setdefault("tie_break", self.tie_break)
        return ScheduleCollection(self.source(), **kwargs)


def read_csv(path: Path) -> pd.DataFrame:
    """Load a CSV file using pandas with UTF-8 defaults."""
    return pd.read_csv(path)


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise FileNotFoundError(path)
    return path


class _BundleLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted ``10:00`` as text instead of the base-60 integer 600."""


_BundleLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_BundleLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^(?:[-+]?0b[0-1_]+|[-+]?0[0-7_]+|[-+]?(?:0|[1-9][0-9_]*)|[-+]?0x[0-9a-fA-F_]+)$"),
    list("-+0123456789"),
)


def _check_time(day_field: str, value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        raise SchedulingValueError(
            f"Working hours {day_field}={value!r} must be a time such as '09:00', not a bare number"
        )
    return value


def parse_day_hours(value: object) -> object:
    """Expand ``"09:00-18:00"`` / ``"closed"`` shorthands into ``DayHours`` payloads.

    Mappings pass through once their times are checked for bare numbers; anything
    else is left for Pydantic to reject.
    """
    if isinstance(value, dict):
        return {key: _check_time(key, item) if key in ("start", "end") else item for key, item in value.items()}
    # PyYAML reads an unquoted ``off`` or ``no`` as False.
    if value is False:
        return {"is_working_day": False}
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    if text.lower() in _CLOSED_TOKENS:
        return {"is_working_day": False}
    if "-" not in text:
        raise SchedulingValueError(f"Working hours '{value}' must look like HH:MM-HH:MM or 'closed'")
    start, end = (part.strip() for part in text.split("-", 1))
    return {"is_working_day": True, "start": start, "end": end}


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return bool(pd.isna(value))
    return False


def _normalise_schedule_row(row: dict[str, Any], location_id: object | None = None) -> dict[str, Any]:
    """Turn a YAML entry or CSV row into a ``ScheduleRecord`` payload."""
    payload = dict(row)
    if location_id is not None:
        payload.setdefault("location_id", location_id)
    for name in _OPTIONAL_FIELDS:
        if name in payload and _is_blank(payload[name]):
            payload.pop(name)
    hours = payload.get("working_hours")
    if hours is None:
        hours = {day: payload.pop(day) for day in WEEKDAYS if day in payload}
    if isinstance(hours, dict):
        payload["working_hours"] = {
            str(day).lower(): parse_day_hours(entry)
            for day, entry in hours.items()
            if not _is_blank(entry)
        }
    return payload


def load_bundle(yaml_path: str | Path, *, emit_warnings: bool = True) -> ScheduleBundle:
    """Load seasonal schedules for one or more locations.

    Parameters
    ----------
    yaml_path:
        Path to the bundle YAML. Schedules can be listed inline under each
        ``locations[*].schedules`` entry and/or in a CSV table referenced by
        ``data.schedules`` (one row per schedule, ``location_id`` column, one
        column per weekday).
    emit_warnings:
        Print equal-priority overlap warnings prefixed with ``[location:<id>]``.

    Returns
    -------
    ScheduleBundle
        Validated records plus the resolver settings from the ``resolver`` section.

    Notes
    -----
    Malformed schedules raise Pydantic ``ValidationError``; duplicate ids within a
    location raise :class:`ScheduleIntegrityError`. Locations only referenced from the
    CSV table are added with their id as the name.
    """
    base_path = Path(yaml_path).resolve()
    with base_path.open("r", encoding="utf-8") as handle:
        meta = yaml.load(handle, Loader=_BundleLoader) or {}
    root = base_path.parent
    data_section = meta.get("data", {}) or {}

    locations: dict[str, str] = {}
    rows: list[dict[str, Any]] = []
    for entry in meta.get("locations", []) or []:
        location_id = entry["id"]
        locations[str(location_id)] = str(entry.get("name") or location_id)
        for schedule in entry.get("schedules", []) or []:
            rows.append(_normalise_schedule_row(schedule, location_id))

    if "schedules" in data_section:
        table = read_csv(_resolve_path(root, data_section["schedules"]))
        for row in cast(list[dict[str, Any]], table.to_dict("records")):
            rows.append(_normalise_schedule_row(row))

    records = TypeAdapter(list[ScheduleRecord]).validate_python(rows)

    grouped: dict[str, list[ScheduleRecord]] = defaultdict(list)
    for record in records:
        grouped[str(record.location_id)].append(record)
    for location_id, location_records in grouped.items():
        locations.setdefault(location_id, location_id)
        check_schedule_integrity(location_records, location_id)

    resolver_section = meta.get("resolver", {}) or {}
    raw_policy = str(resolver_section.get("tie_break", TieBreak.CREATED.value)).lower()
    try:
        tie_break = TieBreak(raw_policy)
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in TieBreak)
        raise SchedulingValueError(
            f"resolver.tie_break must be one of {choices}; got '{raw_policy}'"
        ) from exc

    bundle = ScheduleBundle(
        name=str(meta.get("name") or base_path.stem),
        path=base_path,
        locations=locations,
        records=records,
        tie_break=tie_break,
    )
    for location_id, location_records in grouped.items():
        for message in priority_tie_warnings(location_records):
            bundle.warnings.append(f"[location:{location_id}] {message}")
    if emit_warnings:
        for message in bundle.warnings:
            print(message)
    return bundle
