"""Seasonal working-hours resolution for tire-service points."""

__version__ = "0.3.0"
