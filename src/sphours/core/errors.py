"""Common sphours-specific exceptions."""


class SchedulingValueError(ValueError):
    """Raised when a caller passes arguments the resolver cannot interpret."""


class ScheduleIntegrityError(SchedulingValueError):
    """Raised when a malformed schedule record reaches the collection facade.

    This is a data problem with the records themselves (inverted date range,
    missing weekday entry, duplicate id), never the "no schedule for this date"
    outcome, which is a normal return value.
    """


__all__ = ["SchedulingValueError", "ScheduleIntegrityError"]
