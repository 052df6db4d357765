"""Core utilities shared across sphours modules."""

from .errors import ScheduleIntegrityError, SchedulingValueError

__all__ = ["SchedulingValueError", "ScheduleIntegrityError"]
