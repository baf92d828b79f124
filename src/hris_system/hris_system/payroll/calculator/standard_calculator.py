from __future__ import annotations

from datetime import date
from typing import AbstractSet, Mapping, Optional, Sequence

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import iter_dates
from ...common.time_utils import calculate_late, calculate_night_diff_hours, calculate_undertime
from ...core.constants import HALF_DAY_MULTIPLIER, REST_DAY_PREMIUM, STANDARD_WORK_HOURS
from ...core.enums import AttendanceStatus, HolidayType, SalaryType
from ...employees.model import Employee
from ...holidays.model import Holiday
from ...settings.rates import RateTable
from .base import PayComputation, PayrollCalculator


def daily_rate_for(employee: Employee, cutoff_start: date, cutoff_end: date) -> float:
    """Per-day pay. Monthly salaries are split over the cutoff's working days."""
    comp = employee.compensation
    basic = float(comp.basic_salary or 0)
    if comp.salary_type == SalaryType.DAILY:
        return basic
    if comp.salary_type == SalaryType.HOURLY:
        return basic * STANDARD_WORK_HOURS
    half = basic / 2
    working_days = len(employee.schedule.working_days(cutoff_start, cutoff_end))
    return half / working_days if working_days else half


def _holiday_type(
    day: date, record: Optional[AttendanceRecord], holidays: Mapping[date, Holiday]
) -> Optional[HolidayType]:
    if record is not None and record.is_holiday and record.holiday_type:
        return record.holiday_type
    holiday = holidays.get(day)
    return holiday.type if holiday else None


def _late_hours(record: AttendanceRecord, undertime_hours: float) -> float:
    if record.late is not None:
        return record.late / 60
    if record.status != AttendanceStatus.PRESENT:
        return 0.0
    return calculate_late(record.schedule_in, record.actual_in, undertime_hours) / 60


def _undertime_hours(record: AttendanceRecord) -> float:
    if record.undertime is not None:
        return float(record.undertime)
    if record.status != AttendanceStatus.PRESENT:
        return 0.0
    return calculate_undertime(record.schedule_out, record.actual_out)


def overtime_multiplier(rates: RateTable, *, rest_day: bool, holiday_type: Optional[HolidayType]) -> float:
    if holiday_type == HolidayType.REGULAR:
        rate = rates.regular_holiday_ot_rate
    elif holiday_type == HolidayType.SPECIAL:
        rate = rates.special_holiday_ot_rate
    else:
        return rates.overtime_rest_day_rate if rest_day else rates.overtime_regular_rate
    return rate + REST_DAY_PREMIUM if rest_day else rate


class StandardPayrollCalculator(PayrollCalculator):
    """Walks the cutoff day by day and totals pay from attendance, holidays and schedule."""

    def compute(
        self,
        employee: Employee,
        *,
        cutoff_start: date,
        cutoff_end: date,
        records: Sequence[AttendanceRecord],
        holidays: Mapping[date, Holiday],
        rates: RateTable,
        paid_leave_dates: AbstractSet[date] = frozenset(),
    ) -> PayComputation:
        daily = daily_rate_for(employee, cutoff_start, cutoff_end)
        hourly = daily / STANDARD_WORK_HOURS
        monthly = employee.compensation.salary_type == SalaryType.MONTHLY
        by_date = {r.work_date: r for r in records}
        schedule = employee.schedule

        worked = 0.0
        paid_leave_days = 0
        absences = 0
        late_hours = undertime_hours = overtime_hours = night_hours = 0.0
        holiday_pay = rest_day_pay = overtime_pay = 0.0

        for day in iter_dates(cutoff_start, cutoff_end):
            record = by_date.get(day)
            rest_day = schedule.is_rest_day(day)
            holiday_type = _holiday_type(day, record, holidays)
            paid_leave = day in paid_leave_dates

            if record is None or record.status == AttendanceStatus.ABSENT:
                if paid_leave and not (record is None and rest_day):
                    paid_leave_days += 1
                elif holiday_type == HolidayType.REGULAR:
                    holiday_pay += daily * rates.regular_holiday_rate
                elif record is not None or not rest_day:
                    absences += 1
                continue

            if record.status == AttendanceStatus.LEAVE:
                if paid_leave:
                    paid_leave_days += 1
                continue

            multiplier = HALF_DAY_MULTIPLIER if record.status == AttendanceStatus.HALF_DAY else 1.0
            worked += multiplier
            if rest_day:
                rest_day_pay += daily * REST_DAY_PREMIUM * multiplier
            if holiday_type == HolidayType.REGULAR:
                holiday_pay += daily * rates.regular_holiday_rate * multiplier
            elif holiday_type == HolidayType.SPECIAL:
                holiday_pay += daily * rates.special_holiday_rate * multiplier

            ot = float(record.overtime or 0)
            overtime_hours += ot
            overtime_pay += ot * hourly * overtime_multiplier(rates, rest_day=rest_day, holiday_type=holiday_type)
            night_hours += calculate_night_diff_hours(record.actual_in, record.actual_out)

            day_undertime = _undertime_hours(record)
            undertime_hours += day_undertime
            late_hours += _late_hours(record, day_undertime)

        if monthly:
            basic_pay = float(employee.compensation.basic_salary or 0) / 2
            paid_leave_pay = 0.0
            absent_deduction = absences * daily
        else:
            basic_pay = worked * daily
            paid_leave_pay = paid_leave_days * daily
            absent_deduction = 0.0

        return PayComputation(
            daily_rate=daily,
            hourly_rate=hourly,
            basic_pay=basic_pay,
            days_worked=worked + paid_leave_days,
            absences=absences,
            late_hours=late_hours,
            undertime_hours=undertime_hours,
            overtime_hours=overtime_hours,
            night_diff_hours=night_hours,
            holiday_pay=holiday_pay,
            rest_day_pay=rest_day_pay,
            overtime_pay=overtime_pay,
            night_diff_pay=night_hours * hourly * rates.night_diff_percent,
            paid_leave_pay=paid_leave_pay,
            late_deduction=late_hours * hourly,
            undertime_deduction=undertime_hours * hourly,
            absent_deduction=absent_deduction,
        )
