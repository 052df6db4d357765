"""Context manager capturing telemetry for schedule queries."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class QueryTelemetryLogger(AbstractContextManager["QueryTelemetryLogger"]):
    """Record one JSONL entry per schedule query.

    Parameters
    ----------
    log_path:
        JSONL path where query records are appended.
    command:
        Query identifier (e.g., ``"effective"``, ``"conflicts"``).
    bundle:
        Bundle name the query ran against.
    bundle_path:
        Optional filesystem path to the bundle YAML.
    arguments:
        Query arguments (location, dates, tie-break policy).
    """

    log_path: Path
    command: str
    bundle: str | None = None
    bundle_path: str | None = None
    arguments: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    query_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _start_time: float = field(default=0.0, init=False)
    _start_timestamp: str | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "QueryTelemetryLogger":
        self._start_time = time.perf_counter()
        self._start_timestamp = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self._close(status="error", metrics=None, error=repr(exc))
            return False
        self._close(status="ok", metrics=None, error=None)
        return False

    def elapsed(self) -> float:
        return time.perf_counter() - self._start_time

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Write the query record; later calls (including ``__exit__``) are no-ops."""
        self._close(status=status, metrics=metrics, error=error)

    def _close(
        self,
        *,
        status: str,
        metrics: Mapping[str, Any] | None,
        error: str | None,
    ) -> None:
        if self._closed:
            return
        duration = self.elapsed() if self._start_time else 0.0
        record = {
            "record_type": "query",
            "schema_version": self.schema_version,
            "query_id": self.query_id,
            "command": self.command,
            "bundle": self.bundle,
            "bundle_path": self.bundle_path,
            "arguments": dict(self.arguments or {}),
            "status": status,
            "metrics": dict(metrics or {}),
            "error": error,
            "started_at": self._start_timestamp,
            "finished_at": _iso_now(),
            "duration_seconds": round(duration, 3),
        }
        append_jsonl(self.log_path, record)
        self._closed = True


__all__ = ["QueryTelemetryLogger"]
