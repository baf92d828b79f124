"""Philippine statutory contributions and withholding tax.

Every function takes a monthly amount and returns monthly shares; splitting
across cutoffs is left to GovernmentDeductionToggle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from ..core.constants import (
    PAGIBIG_MAX,
    PAGIBIG_RATE,
    PHILHEALTH_RATE,
    SSS_EMPLOYEE_RATE,
    SSS_MAX_MSC,
    STANDARD_WORK_HOURS,
)
from ..core.enums import SalaryType
from ..employees.model import Employee


@dataclass(frozen=True)
class Contribution:
    employee: float
    employer: float


def compute_sss(monthly_pay: float) -> Contribution:
    """2024 SSS table; the employer share mirrors the employee share."""
    if monthly_pay < 1000:
        return Contribution(0.0, 0.0)
    if monthly_pay < 1250:
        msc = 1000
    else:
        msc = min(1500 + 500 * math.floor((monthly_pay - 1250) / 500), SSS_MAX_MSC)
    share = msc * SSS_EMPLOYEE_RATE
    return Contribution(share, share)


def compute_philhealth(monthly_pay: float) -> Contribution:
    share = monthly_pay * PHILHEALTH_RATE / 2
    return Contribution(share, share)


def compute_pagibig(monthly_pay: float) -> Contribution:
    share = min(monthly_pay * PAGIBIG_RATE, PAGIBIG_MAX)
    return Contribution(share, share)


# (upper bound, base tax, rate over the lower bound, lower bound)
_TAX_BRACKETS = (
    (20833, 0.0, 0.0, 0),
    (33333, 0.0, 0.20, 20833),
    (66667, 2500.0, 0.25, 33333),
    (166667, 10833.33, 0.30, 66667),
    (666667, 40833.33, 0.32, 166667),
)


def compute_withholding_tax(taxable_income: float) -> float:
    """TRAIN law monthly withholding table."""
    for upper, base, rate, lower in _TAX_BRACKETS:
        if taxable_income <= upper:
            return base + (taxable_income - lower) * rate if rate else base
    return 200833.33 + (taxable_income - 666667) * 0.35


def monthly_pay_basis(employee: Employee, reference: date) -> float:
    """Monthly-equivalent basic pay used for contribution brackets."""
    comp = employee.compensation
    basic = float(comp.basic_salary or 0)
    if comp.salary_type == SalaryType.DAILY:
        return basic * employee.schedule.working_days_in_month(reference)
    if comp.salary_type == SalaryType.HOURLY:
        return basic * STANDARD_WORK_HOURS * employee.schedule.working_days_in_month(reference)
    return basic
