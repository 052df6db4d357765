import pytest

from sphours.core.errors import ScheduleIntegrityError
from sphours.scenario.contract import ScheduleRecord
from sphours.validation.integrity import check_schedule_integrity, priority_tie_warnings
from tests.records import make_record


def test_well_formed_records_pass():
    check_schedule_integrity([make_record(1), make_record(2)], 12)


def test_duplicate_ids_are_rejected():
    with pytest.raises(ScheduleIntegrityError, match="duplicate id"):
        check_schedule_integrity([make_record(1), make_record("1")])


def test_foreign_location_is_rejected():
    with pytest.raises(ScheduleIntegrityError, match="belongs to location 99"):
        check_schedule_integrity([make_record(1, location_id=99)], 12)


def test_unvalidated_records_are_rechecked():
    valid = make_record(1)
    inverted = ScheduleRecord.model_construct(
        **{**valid.__dict__, "start_date": valid.end_date, "end_date": valid.start_date}
    )
    sparse = ScheduleRecord.model_construct(
        **{**make_record(2).__dict__, "working_hours": {"monday": valid.working_hours["monday"]}}
    )
    with pytest.raises(ScheduleIntegrityError) as excinfo:
        check_schedule_integrity([inverted, sparse])
    message = str(excinfo.value)
    assert "Schedule 1: start_date" in message
    assert "Schedule 2: working_hours missing tuesday" in message


def test_priority_tie_warnings_only_for_active_overlaps():
    first = make_record(1, start="2025-07-01", end="2025-07-31", priority=30)
    second = make_record(2, start="2025-07-15", end="2025-08-15", priority=30)
    other_priority = make_record(3, start="2025-07-01", end="2025-07-31", priority=40)
    disjoint = make_record(4, start="2025-09-01", end="2025-09-30", priority=30)
    disabled = make_record(5, start="2025-07-01", end="2025-07-31", priority=30, is_active=False)
    warnings = priority_tie_warnings([first, second, other_priority, disjoint, disabled])
    assert len(warnings) == 1
    assert "Schedules 1 and 2" in warnings[0]
