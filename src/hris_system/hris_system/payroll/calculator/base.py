from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Mapping, Sequence

from ...attendance.model import AttendanceRecord
from ...employees.model import Employee
from ...holidays.model import Holiday
from ...settings.rates import RateTable


@dataclass(frozen=True)
class PayComputation:
    """Earnings and attendance totals of one employee over one cutoff."""

    daily_rate: float
    hourly_rate: float
    basic_pay: float
    days_worked: float
    absences: int
    late_hours: float
    undertime_hours: float
    overtime_hours: float
    night_diff_hours: float
    holiday_pay: float
    rest_day_pay: float
    overtime_pay: float
    night_diff_pay: float
    paid_leave_pay: float
    late_deduction: float
    undertime_deduction: float
    absent_deduction: float

    @property
    def base_pay(self) -> float:
        return (
            self.basic_pay
            + self.holiday_pay
            + self.rest_day_pay
            + self.overtime_pay
            + self.night_diff_pay
            + self.paid_leave_pay
        )


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
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
        raise NotImplementedError
