"""Command-line interface for sphours."""
