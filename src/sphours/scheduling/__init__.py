"""Seasonal schedule resolution (classification, resolution, projection, facade)."""

from .classifier import DisplayStatus, ScheduleStatus, classify, display_status, filter_by_status
from sphours.scenario.contract import WEEKDAYS, DayHours, ScheduleRecord
from .facade import (
    InMemoryScheduleSource,
    ResolvedDay,
    ScheduleCollection,
    ScheduleFilters,
    ScheduleSource,
    ScheduleSummary,
)
from .projection import DayProjection, project_date, project_day, project_week
from .resolver import TieBreak, nearest_schedule, resolve_active, resolve_active_for_period
from .templates import apply_pattern, copy_day_to_all, default_working_hours

__all__ = [
    "WEEKDAYS",
    "DayHours",
    "ScheduleRecord",
    "ScheduleStatus",
    "DisplayStatus",
    "classify",
    "display_status",
    "filter_by_status",
    "TieBreak",
    "resolve_active",
    "resolve_active_for_period",
    "nearest_schedule",
    "DayProjection",
    "project_day",
    "project_date",
    "project_week",
    "default_working_hours",
    "apply_pattern",
    "copy_day_to_all",
    "ScheduleFilters",
    "ScheduleSource",
    "InMemoryScheduleSource",
    "ResolvedDay",
    "ScheduleSummary",
    "ScheduleCollection",
]
