"""Schedule bundle loaders (YAML metadata + CSV tables)."""

from .loaders import ScheduleBundle, load_bundle

__all__ = ["ScheduleBundle", "load_bundle"]
