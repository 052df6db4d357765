from datetime import date, time

import pytest

from sphours.core.errors import ScheduleIntegrityError, SchedulingValueError
from sphours.scenario.contract import ScheduleRecord
from sphours.scheduling.projection import (
    DayProjection,
    period_description,
    project_date,
    project_day,
    project_week,
    weekday_key,
    working_days_count,
)
from tests.records import CLOSED, make_record, week

RECORD = make_record(
    start="2025-02-01",
    end="2025-02-14",
    hours=week(
        monday={"is_working_day": False, "start": "09:00", "end": "18:00"},
        saturday={"is_working_day": True, "start": "10:00", "end": "14:00"},
        sunday=CLOSED,
    ),
)


def test_non_working_day_projects_closed_without_times():
    assert project_day(RECORD, "monday") == DayProjection(is_working_day=False)


def test_working_day_projects_exact_hours():
    projection = project_day(RECORD, "Saturday")
    assert projection.is_working_day
    assert (projection.start, projection.end) == (time(10, 0), time(14, 0))


def test_unknown_weekday_is_rejected():
    with pytest.raises(SchedulingValueError, match="Unknown weekday"):
        project_day(RECORD, "someday")


def test_missing_entry_is_an_integrity_error():
    hours = dict(RECORD.working_hours)
    del hours["friday"]
    broken = ScheduleRecord.model_construct(**{**RECORD.__dict__, "working_hours": hours})
    with pytest.raises(ScheduleIntegrityError, match="no working_hours entry for 'friday'"):
        project_day(broken, "friday")


def test_project_date_uses_calendar_weekday():
    assert weekday_key(date(2025, 2, 8)) == "saturday"
    assert project_date(RECORD, date(2025, 2, 8)).start == time(10, 0)
    assert not project_date(RECORD, date(2025, 2, 10)).is_working_day


def test_week_projection_and_counts():
    projected = project_week(RECORD)
    assert list(projected)[0] == "monday"
    assert working_days_count(RECORD) == 5
    assert period_description(RECORD) == "01.02.2025 - 14.02.2025"


def test_projection_as_dict():
    assert project_day(RECORD, "saturday").as_dict() == {
        "is_working_day": True,
        "start": "10:00",
        "end": "14:00",
    }
    assert project_day(RECORD, "sunday").as_dict() == {"is_working_day": False}
