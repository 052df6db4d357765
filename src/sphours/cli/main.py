from __future__ import annotations

import json
from contextlib import nullcontext
from datetime import datetime
from pathlib import Path
from typing import Any

import click
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sphours.core.errors import SchedulingValueError
from sphours.scenario.io import ScheduleBundle, load_bundle
from sphours.scheduling.classifier import display_status
from sphours.scheduling.facade import ResolvedDay
from sphours.scheduling.projection import DayProjection, period_description, working_days_count
from sphours.scheduling.resolver import TieBreak
from sphours.telemetry import QueryTelemetryLogger

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()
TIE_BREAK = click.Choice([policy.value for policy in TieBreak], case_sensitive=False)
DATE_FORMATS = ["%Y-%m-%d"]

_TELEMETRY_HELP = "Append a query record to a JSONL file (e.g. telemetry/queries.jsonl)."


def _load(bundle_path: Path) -> ScheduleBundle:
    try:
        return load_bundle(bundle_path, emit_warnings=False)
    except FileNotFoundError as exc:
        console.print(f"[red]Bundle file not found:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    except (ValidationError, SchedulingValueError) as exc:
        console.print(f"[red]Invalid schedule bundle:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def _require_location(bundle: ScheduleBundle, location: str) -> None:
    if location not in bundle.locations:
        known = ", ".join(sorted(bundle.locations)) or "none"
        console.print(f"[red]Unknown location '{location}'.[/red] Known locations: {known}")
        raise typer.Exit(1)


def _telemetry(
    telemetry_log: Path | None, command: str, bundle: ScheduleBundle, arguments: dict[str, Any]
):
    if telemetry_log is None:
        return nullcontext(None)
    return QueryTelemetryLogger(
        log_path=telemetry_log,
        command=command,
        bundle=bundle.name,
        bundle_path=str(bundle.path),
        arguments=arguments,
    )


def _format_hours(hours: DayProjection | None) -> str:
    if hours is None:
        return "base schedule"
    if not hours.is_working_day:
        return "closed"
    assert hours.start is not None and hours.end is not None
    return f"{hours.start:%H:%M}-{hours.end:%H:%M}"


def _resolved_row(resolved: ResolvedDay) -> tuple[str, str, str, str]:
    schedule = "-" if resolved.schedule is None else f"{escape(resolved.schedule.name)} (#{resolved.schedule.id})"
    return (resolved.date.isoformat(), resolved.weekday, schedule, _format_hours(resolved.hours))


@app.command()
def validate(
    bundle_path: Path = typer.Argument(..., metavar="BUNDLE"),
    telemetry_log: Path | None = typer.Option(None, "--telemetry-log", help=_TELEMETRY_HELP, dir_okay=False),
):
    """Validate a schedule bundle and print a per-location summary."""
    bundle = _load(bundle_path)
    with _telemetry(telemetry_log, "validate", bundle, {}) as telemetry:
        if telemetry is not None:
            telemetry.finalize(
                metrics={
                    "locations": len(bundle.locations),
                    "schedules": len(bundle.records),
                    "warnings": len(bundle.warnings),
                }
            )
    table = Table(title=f"Bundle: {bundle.name}")
    table.add_column("Location")
    table.add_column("Name")
    table.add_column("Schedules")
    table.add_column("Active")
    for location_id, name in sorted(bundle.locations.items()):
        records = bundle.records_for(location_id)
        table.add_row(
            location_id,
            escape(name),
            str(len(records)),
            str(sum(1 for record in records if record.is_active)),
        )
    console.print(table)
    for message in bundle.warnings:
        console.print(f"[yellow]{escape(message)}[/yellow]")


@app.command()
def status(
    bundle_path: Path = typer.Argument(..., metavar="BUNDLE"),
    location: str = typer.Argument(...),
    on: datetime | None = typer.Option(None, "--date", formats=DATE_FORMATS, help="Reference date (default: today)."),
    telemetry_log: Path | None = typer.Option(None, "--telemetry-log", help=_TELEMETRY_HELP, dir_okay=False),
):
    """List a location's schedules with their lifecycle status."""
    bundle = _load(bundle_path)
    _require_location(bundle, location)
    collection = bundle.collection()
    arguments = {"location": location, "date": on.date() if on else None}
    with _telemetry(telemetry_log, "status", bundle, arguments) as telemetry:
        summary = collection.summary(location, on)
        if telemetry is not None:
            telemetry.finalize(
                metrics={
                    "total": summary.total,
                    "active": summary.active,
                    "nearest_id": None if summary.nearest is None else summary.nearest.id,
                }
            )
    table = Table(title=f"{bundle.locations[location]} on {summary.reference_date.isoformat()}")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Period")
    table.add_column("Priority")
    table.add_column("Working days")
    table.add_column("Status")
    records = sorted(collection.records_for(location), key=lambda record: (record.start_date, str(record.id)))
    for record in records:
        table.add_row(
            str(record.id),
            escape(record.name),
            period_description(record),
            str(record.priority),
            str(working_days_count(record)),
            display_status(record, summary.reference_date).value,
        )
    console.print(table)
    counts = ", ".join(f"{key}={value}" for key, value in summary.by_status.items())
    console.print(f"Total: {summary.total} (active {summary.active}); {counts}")
    if summary.nearest is not None:
        console.print(f"Nearest schedule: {escape(summary.nearest.name)} (#{summary.nearest.id})")


@app.command()
def effective(
    bundle_path: Path = typer.Argument(..., metavar="BUNDLE"),
    location: str = typer.Argument(...),
    on: datetime | None = typer.Option(None, "--date", formats=DATE_FORMATS, help="Date to resolve (default: today)."),
    tie_break: str | None = typer.Option(
        None,
        "--tie-break",
        help="Equal-priority ordering; overrides the bundle's resolver.tie_break.",
        show_choices=True,
        click_type=TIE_BREAK,
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the resolved day as JSON."),
    telemetry_log: Path | None = typer.Option(None, "--telemetry-log", help=_TELEMETRY_HELP, dir_okay=False),
):
    """Resolve the effective seasonal schedule and hours for a date."""
    bundle = _load(bundle_path)
    _require_location(bundle, location)
    policy = TieBreak(tie_break.lower()) if tie_break else bundle.tie_break
    collection = bundle.collection(tie_break=policy)
    arguments = {"location": location, "date": on.date() if on else None, "tie_break": policy.value}
    with _telemetry(telemetry_log, "effective", bundle, arguments) as telemetry:
        resolved = collection.effective_schedule_for(location, on)
        if telemetry is not None:
            telemetry.finalize(
                metrics={
                    "uses_base_schedule": resolved.uses_base_schedule,
                    "schedule_id": None if resolved.schedule is None else resolved.schedule.id,
                }
            )
    if as_json:
        typer.echo(json.dumps(resolved.as_dict(), ensure_ascii=False))
        return
    day, weekday, schedule, hours = _resolved_row(resolved)
    if resolved.uses_base_schedule:
        console.print(f"{day} ({weekday}): no seasonal schedule applies; use the base schedule.")
        return
    console.print(f"{day} ({weekday}): {schedule} -> {hours}")


@app.command()
def week(
    bundle_path: Path = typer.Argument(..., metavar="BUNDLE"),
    location: str = typer.Argument(...),
    start: datetime | None = typer.Option(None, "--start", formats=DATE_FORMATS, help="First day (default: today)."),
    telemetry_log: Path | None = typer.Option(None, "--telemetry-log", help=_TELEMETRY_HELP, dir_okay=False),
):
    """Resolve seven consecutive days for a location."""
    bundle = _load(bundle_path)
    _require_location(bundle, location)
    arguments = {"location": location, "start": start.date() if start else None}
    with _telemetry(telemetry_log, "week", bundle, arguments) as telemetry:
        days = bundle.collection().effective_week(location, start)
        if telemetry is not None:
            telemetry.finalize(
                metrics={"base_schedule_days": sum(1 for resolved in days if resolved.uses_base_schedule)}
            )
    table = Table(title=f"{bundle.locations[location]}: week from {days[0].date.isoformat()}")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Schedule")
    table.add_column("Hours")
    for resolved in days:
        table.add_row(*_resolved_row(resolved))
    console.print(table)


@app.command()
def conflicts(
    bundle_path: Path = typer.Argument(..., metavar="BUNDLE"),
    location: str = typer.Argument(...),
    start: datetime = typer.Argument(..., formats=DATE_FORMATS),
    end: datetime = typer.Argument(..., formats=DATE_FORMATS),
    exclude: str | None = typer.Option(None, "--exclude", help="Schedule id being edited."),
    telemetry_log: Path | None = typer.Option(None, "--telemetry-log", help=_TELEMETRY_HELP, dir_okay=False),
):
    """List active schedules overlapping START..END (inclusive)."""
    bundle = _load(bundle_path)
    _require_location(bundle, location)
    collection = bundle.collection()
    arguments = {"location": location, "start": start.date(), "end": end.date(), "exclude": exclude}
    with _telemetry(telemetry_log, "conflicts", bundle, arguments) as telemetry:
        try:
            overlapping = collection.find_conflicts(location, start.date(), end.date(), exclude)
        except SchedulingValueError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            raise typer.Exit(1)
        if telemetry is not None:
            telemetry.finalize(metrics={"conflicts": len(overlapping)})
    if not overlapping:
        console.print("No overlapping active schedules.")
        return
    table = Table(title=f"Overlaps with {start.date().isoformat()}..{end.date().isoformat()}")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Period")
    table.add_column("Priority")
    for record in overlapping:
        table.add_row(str(record.id), escape(record.name), period_description(record), str(record.priority))
    console.print(table)


if __name__ == "__main__":
    app()
