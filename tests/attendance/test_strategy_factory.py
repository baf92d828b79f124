from datetime import date

import pytest

from hris_system.attendance.factory import AttendanceStrategyFactory
from hris_system.attendance.model import AttendanceEntry, AttendanceRecord
from hris_system.attendance.overrides import KEEP, RECALCULATE, SetTo, override_from_payload
from hris_system.attendance.resolver import resolve_attendance
from hris_system.attendance.strategies.cleared_strategy import ClearedStrategy
from hris_system.attendance.strategies.half_day_strategy import HalfDayStrategy
from hris_system.attendance.strategies.present_strategy import PresentStrategy
from hris_system.core.enums import AttendanceStatus
from hris_system.core.exceptions import ValidationError


def _entry(status=AttendanceStatus.PRESENT, actual_in="09:15", actual_out="18:00", overtime=None):
    return AttendanceEntry(
        organization_id=1,
        employee_id=1,
        work_date=date(2025, 3, 3),
        schedule_in="09:00",
        schedule_out="18:00",
        status=status,
        actual_in=actual_in,
        actual_out=actual_out,
        overtime=overtime,
    )


def _stored(late, undertime):
    return AttendanceRecord(
        attendance_id=1,
        organization_id=1,
        employee_id=1,
        work_date=date(2025, 3, 3),
        schedule_in="09:00",
        schedule_out="18:00",
        status=AttendanceStatus.PRESENT,
        actual_in="09:15",
        actual_out="18:00",
        late=late,
        undertime=undertime,
    )


def test_factory_picks_strategy_by_status():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_status(AttendanceStatus.PRESENT), PresentStrategy)
    assert isinstance(factory.for_status(AttendanceStatus.HALF_DAY), HalfDayStrategy)
    assert isinstance(factory.for_status(AttendanceStatus.ABSENT), ClearedStrategy)
    assert isinstance(factory.for_status(AttendanceStatus.LEAVE), ClearedStrategy)


def test_present_entry_is_derived_on_create():
    resolved = resolve_attendance(_entry())
    assert resolved.late == 15
    assert resolved.undertime == 0


def test_late_is_derived_from_pinned_undertime():
    resolved = resolve_attendance(_entry(), undertime=SetTo(1.0))
    assert resolved.undertime == 1.0
    assert resolved.late == 0


def test_explicit_zero_is_kept():
    resolved = resolve_attendance(_entry(), late=SetTo(0))
    assert resolved.late == 0


def test_keep_preserves_stored_values_on_update():
    resolved = resolve_attendance(_entry(actual_in="10:00"), current=_stored(late=5, undertime=0.0))
    assert resolved.late == 5


def test_recalculate_ignores_stored_values():
    resolved = resolve_attendance(
        _entry(actual_in="10:00"), late=RECALCULATE, undertime=RECALCULATE, current=_stored(late=5, undertime=0.0)
    )
    assert resolved.late == 60


def test_absent_and_leave_drop_punches_and_overtime():
    for status in (AttendanceStatus.ABSENT, AttendanceStatus.LEAVE):
        resolved = resolve_attendance(_entry(status=status, overtime=2.0), late=SetTo(30))
        assert resolved.actual_in is None
        assert resolved.actual_out is None
        assert resolved.overtime is None
        assert resolved.late == 0
        assert resolved.undertime == 0


def test_half_day_keeps_punches_without_deriving():
    resolved = resolve_attendance(_entry(status=AttendanceStatus.HALF_DAY, actual_in="09:30", actual_out="13:00"))
    assert resolved.actual_in == "09:30"
    assert resolved.actual_out == "13:00"
    assert resolved.late == 0
    assert resolved.undertime == 0


def test_override_from_payload_maps_wire_shapes():
    assert override_from_payload({}, "late") == KEEP
    assert override_from_payload({"late": None}, "late") == RECALCULATE
    assert override_from_payload({"late": 0}, "late") == SetTo(0.0)
    with pytest.raises(ValidationError):
        override_from_payload({"late": -1}, "late")
