from datetime import date

import pytest

from hris_system.attendance.model import AttendanceRecord
from hris_system.core.enums import AttendanceStatus, HolidayType, SalaryType
from hris_system.holidays.model import Holiday
from hris_system.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    daily_rate_for,
    overtime_multiplier,
)
from hris_system.settings.rates import resolve_rates

from tests.factories import make_employee

MONDAY = date(2025, 3, 3)
FRIDAY = date(2025, 3, 7)
SATURDAY = date(2025, 3, 8)
WEDNESDAY = date(2025, 3, 5)

RATES = resolve_rates()


def _record(day, *, status=AttendanceStatus.PRESENT, actual_in="09:00", actual_out="18:00", late=None, overtime=None):
    cleared = status in (AttendanceStatus.ABSENT, AttendanceStatus.LEAVE)
    return AttendanceRecord(
        attendance_id=day.day,
        organization_id=1,
        employee_id=1,
        work_date=day,
        schedule_in="09:00",
        schedule_out="18:00",
        status=status,
        actual_in=None if cleared else actual_in,
        actual_out=None if cleared else actual_out,
        late=late,
        overtime=overtime,
    )


def _week(*, skip=(), **overrides):
    return [
        overrides.get(day.isoformat(), _record(day))
        for day in (date(2025, 3, d) for d in range(3, 8))
        if day not in skip
    ]


def _holiday(day, type):
    return {day: Holiday(holiday_id=1, organization_id=1, name="Holiday", holiday_date=day, type=type, is_recurring=False)}


def _compute(employee, records, *, end=FRIDAY, holidays=None, paid_leave=frozenset()):
    return StandardPayrollCalculator().compute(
        employee,
        cutoff_start=MONDAY,
        cutoff_end=end,
        records=records,
        holidays=holidays or {},
        rates=RATES,
        paid_leave_dates=paid_leave,
    )


def test_daily_rate_by_salary_type():
    assert daily_rate_for(make_employee(basic_salary=650), MONDAY, FRIDAY) == 650
    assert daily_rate_for(make_employee(basic_salary=100, salary_type=SalaryType.HOURLY), MONDAY, FRIDAY) == 800
    monthly = make_employee(basic_salary=30000, salary_type=SalaryType.MONTHLY)
    assert daily_rate_for(monthly, MONDAY, FRIDAY) == 3000


def test_full_week_for_daily_employee():
    pay = _compute(make_employee(), _week())
    assert pay.basic_pay == 3250
    assert pay.days_worked == 5
    assert pay.absences == 0
    assert pay.base_pay == 3250


def test_daily_absence_is_simply_unpaid():
    absent = _record(WEDNESDAY, status=AttendanceStatus.ABSENT)
    pay = _compute(make_employee(), _week(**{WEDNESDAY.isoformat(): absent}))
    assert pay.basic_pay == 2600
    assert pay.absences == 1
    assert pay.absent_deduction == 0


def test_monthly_absence_is_deducted():
    employee = make_employee(basic_salary=30000, salary_type=SalaryType.MONTHLY)
    pay = _compute(employee, _week(skip={WEDNESDAY}))
    assert pay.basic_pay == 15000
    assert pay.absences == 1
    assert pay.absent_deduction == 3000


def test_missing_rest_day_is_not_an_absence():
    pay = _compute(make_employee(), _week(), end=SATURDAY)
    assert pay.absences == 0


def test_unworked_regular_holiday_is_paid():
    pay = _compute(make_employee(), _week(skip={WEDNESDAY}), holidays=_holiday(WEDNESDAY, HolidayType.REGULAR))
    assert pay.holiday_pay == 650
    assert pay.absences == 0
    assert pay.base_pay == 3250


def test_worked_holidays_earn_premiums():
    regular = _compute(make_employee(), _week(), holidays=_holiday(WEDNESDAY, HolidayType.REGULAR))
    special = _compute(make_employee(), _week(), holidays=_holiday(WEDNESDAY, HolidayType.SPECIAL))
    working = _compute(make_employee(), _week(), holidays=_holiday(WEDNESDAY, HolidayType.SPECIAL_WORKING))

    assert regular.holiday_pay == 650
    assert special.holiday_pay == pytest.approx(195)
    assert working.holiday_pay == 0


def test_unworked_special_holiday_is_an_absence():
    pay = _compute(make_employee(), _week(skip={WEDNESDAY}), holidays=_holiday(WEDNESDAY, HolidayType.SPECIAL))
    assert pay.holiday_pay == 0
    assert pay.absences == 1


def test_rest_day_work_earns_premium():
    pay = _compute(make_employee(), _week() + [_record(SATURDAY)], end=SATURDAY)
    assert pay.days_worked == 6
    assert pay.rest_day_pay == pytest.approx(195)


def test_half_day_counts_half():
    half = _record(WEDNESDAY, status=AttendanceStatus.HALF_DAY, actual_out="13:00")
    pay = _compute(make_employee(), _week(**{WEDNESDAY.isoformat(): half}))
    assert pay.days_worked == 4.5
    assert pay.basic_pay == 2925
    assert pay.undertime_hours == 0


def test_overtime_and_multipliers():
    ot = _record(MONDAY, actual_out="22:00", overtime=4)
    pay = _compute(make_employee(), _week(**{MONDAY.isoformat(): ot}))

    assert pay.overtime_hours == 4
    assert pay.overtime_pay == pytest.approx(406.25)
    assert overtime_multiplier(RATES, rest_day=True, holiday_type=None) == 1.69
    assert overtime_multiplier(RATES, rest_day=True, holiday_type=HolidayType.REGULAR) == pytest.approx(2.3)
    assert overtime_multiplier(RATES, rest_day=False, holiday_type=HolidayType.SPECIAL_WORKING) == 1.25


def test_late_and_undertime_deductions_use_hourly_rate():
    late = _record(MONDAY, actual_in="09:15", late=15)
    early = _record(WEDNESDAY, actual_out="16:00")
    pay = _compute(make_employee(), _week(**{MONDAY.isoformat(): late, WEDNESDAY.isoformat(): early}))

    assert pay.late_hours == 0.25
    assert pay.undertime_hours == 2
    assert pay.late_deduction == pytest.approx(20.3125)
    assert pay.undertime_deduction == pytest.approx(162.5)


def test_night_differential_from_punches():
    night = _record(MONDAY, actual_in="22:00", actual_out="06:00")
    pay = _compute(make_employee(), _week(**{MONDAY.isoformat(): night}))
    assert pay.night_diff_hours == 8
    assert pay.night_diff_pay == pytest.approx(65)


def test_paid_leave_for_daily_employee():
    leave = _record(WEDNESDAY, status=AttendanceStatus.LEAVE)
    records = _week(**{WEDNESDAY.isoformat(): leave})

    paid = _compute(make_employee(), records, paid_leave=frozenset({WEDNESDAY}))
    unpaid = _compute(make_employee(), records)

    assert paid.days_worked == 5
    assert paid.paid_leave_pay == 650
    assert paid.base_pay == 3250
    assert unpaid.days_worked == 4
    assert unpaid.absences == 0


def test_paid_leave_for_monthly_employee_is_already_in_salary():
    employee = make_employee(basic_salary=30000, salary_type=SalaryType.MONTHLY)
    pay = _compute(employee, _week(skip={WEDNESDAY}), paid_leave=frozenset({WEDNESDAY}))
    assert pay.paid_leave_pay == 0
    assert pay.absences == 0
    assert pay.basic_pay == 15000
