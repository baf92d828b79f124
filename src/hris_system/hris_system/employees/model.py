from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import EmploymentStatus, EmploymentType, RecurringFrequency, SalaryType
from ..schedules.model import DEFAULT_BULK_SCHEDULE, WeeklySchedule


@dataclass(frozen=True)
class Compensation:
    """Pay terms. Rates are decimals (1.25 = 125%); None defers to org settings."""

    basic_salary: float
    salary_type: SalaryType
    allowance: Optional[float] = None
    regular_holiday_rate: Optional[float] = None
    special_holiday_rate: Optional[float] = None
    night_diff_percent: Optional[float] = None
    overtime_regular_rate: Optional[float] = None
    overtime_rest_day_rate: Optional[float] = None
    regular_holiday_ot_rate: Optional[float] = None
    special_holiday_ot_rate: Optional[float] = None


@dataclass(frozen=True)
class RecurringDeduction:
    """Standing deduction such as a salary loan."""

    name: str
    amount: float
    type: str = "loan"
    frequency: RecurringFrequency = RecurringFrequency.PER_CUTOFF
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True

    def applies_to(self, cutoff_start: date, cutoff_end: date) -> bool:
        if not self.is_active:
            return False
        if self.start_date and self.start_date > cutoff_end:
            return False
        if self.end_date and self.end_date < cutoff_start:
            return False
        return True

    def amount_per_cutoff(self) -> float:
        if self.frequency == RecurringFrequency.MONTHLY:
            return self.amount / 2
        return self.amount


@dataclass(frozen=True)
class Employee:
    employee_id: int
    organization_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    position: str
    department: str
    employment_type: EmploymentType
    hire_date: date
    compensation: Compensation
    schedule: WeeklySchedule = DEFAULT_BULK_SCHEDULE
    middle_name: Optional[str] = None
    phone: Optional[str] = None
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    recurring_deductions: tuple[RecurringDeduction, ...] = field(default_factory=tuple)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class NewEmployee:
    """Validated input for EmployeeRepository.create (no id or code yet)."""

    organization_id: int
    first_name: str
    last_name: str
    email: str
    position: str
    department: str
    employment_type: EmploymentType
    hire_date: date
    compensation: Compensation
    schedule: WeeklySchedule = DEFAULT_BULK_SCHEDULE
    middle_name: Optional[str] = None
    phone: Optional[str] = None
    employee_code: Optional[str] = None
    recurring_deductions: tuple[RecurringDeduction, ...] = field(default_factory=tuple)
