"""Integrity checks applied before schedules reach the resolver."""

from .integrity import check_schedule_integrity, priority_tie_warnings

__all__ = ["check_schedule_integrity", "priority_tie_warnings"]
