from datetime import date

import pytest

from hris_system.attendance.bulk import BulkAttendanceDraft
from hris_system.core.enums import AttendanceStatus
from hris_system.core.exceptions import BusinessRuleViolation, ValidationError
from hris_system.schedules.model import ScheduleOverride, build_weekly_schedule

from tests.factories import make_employee

MONDAY = date(2025, 3, 3)
SUNDAY = date(2025, 3, 9)


def _draft(**kwargs):
    return BulkAttendanceDraft(make_employee(), start_date=MONDAY, end_date=SUNDAY, **kwargs)


def test_range_follows_schedule_workdays():
    draft = _draft()
    assert draft.get_bulk_dates() == [date(2025, 3, d) for d in range(3, 8)]


def test_weekend_flags_add_rest_days():
    draft = _draft(include_saturday=True)
    assert date(2025, 3, 8) in draft.get_bulk_dates()
    assert SUNDAY not in draft.get_bulk_dates()


def test_exclude_and_restore_a_day():
    draft = _draft()
    wednesday = date(2025, 3, 5)

    assert draft.exclude(wednesday)
    assert wednesday not in draft.get_bulk_dates()
    assert draft.get_excluded_dates() == [wednesday]

    assert draft.restore(wednesday)
    assert len(draft.get_bulk_dates()) == 5
    assert not draft.restore(wednesday)


def test_cannot_exclude_day_outside_candidates():
    draft = _draft()
    assert not draft.exclude(date(2025, 3, 8))


def test_shrinking_range_forgets_exclusions():
    draft = _draft()
    draft.exclude(date(2025, 3, 7))
    draft.set_range(start_date=MONDAY, end_date=date(2025, 3, 5))
    assert draft.get_excluded_dates() == []
    assert len(draft.get_bulk_dates()) == 3


def test_apply_to_all_builds_one_entry_per_day():
    draft = _draft()
    draft.exclude(date(2025, 3, 4))
    draft.apply_to_all(time_in="09:00", time_out="18:00")

    entries = draft.build_entries()

    assert [e.work_date for e in entries] == [date(2025, 3, d) for d in (3, 5, 6, 7)]
    assert all(e.schedule_in == "09:00" and e.schedule_out == "18:00" for e in entries)
    assert all(e.status == AttendanceStatus.PRESENT for e in entries)


def test_present_day_without_punches_names_the_date():
    draft = _draft()
    draft.apply_to_all(time_in="09:00", time_out="18:00")
    draft.set_day(date(2025, 3, 6), time_in="", time_out="")

    with pytest.raises(ValidationError) as info:
        draft.build_entries()

    assert info.value.context == "2025-03-06"


def test_absent_day_drops_punches_and_overtime():
    draft = _draft()
    draft.apply_to_all(time_in="09:00", time_out="18:00")
    draft.set_day(MONDAY, status="absent", overtime="2")

    first = draft.build_entries()[0]

    assert first.status == AttendanceStatus.ABSENT
    assert first.actual_in is None
    assert first.overtime is None


def test_negative_overtime_is_rejected():
    draft = _draft()
    draft.apply_to_all(time_in="09:00", time_out="18:00", overtime="-1")
    with pytest.raises(ValidationError):
        draft.build_entries()


def test_reversed_or_empty_range_is_rejected():
    with pytest.raises(BusinessRuleViolation):
        BulkAttendanceDraft(make_employee(), start_date=SUNDAY, end_date=MONDAY).build_entries()
    with pytest.raises(BusinessRuleViolation):
        BulkAttendanceDraft(make_employee(), start_date=date(2025, 3, 8), end_date=SUNDAY).build_entries()


def test_schedule_override_date_is_a_workday_with_its_own_hours():
    schedule = build_weekly_schedule(
        overrides=[ScheduleOverride(work_date=date(2025, 3, 8), time_in="08:00", time_out="12:00")]
    )
    draft = BulkAttendanceDraft(make_employee(schedule=schedule), start_date=MONDAY, end_date=SUNDAY)
    draft.apply_to_all(time_in="08:00", time_out="12:00")

    saturday = draft.build_entries()[-1]

    assert saturday.work_date == date(2025, 3, 8)
    assert saturday.schedule_in == "08:00"
    assert saturday.schedule_out == "12:00"
