from datetime import date

import pytest

from hris_system.core.enums import DeductionFrequency, PayrollRunStatus, SalaryType
from hris_system.core.exceptions import BusinessRuleViolation
from hris_system.payroll.contributions import (
    compute_pagibig,
    compute_philhealth,
    compute_sss,
    compute_withholding_tax,
    monthly_pay_basis,
)
from hris_system.payroll.model import GovernmentDeductionToggle
from hris_system.payroll.status import can_transition, ensure_transition
from hris_system.schedules.model import build_weekly_schedule

from tests.factories import make_employee


def test_sss_brackets():
    assert compute_sss(900).employee == 0
    assert compute_sss(1100).employee == pytest.approx(45)
    assert compute_sss(13650).employee == pytest.approx(607.5)
    assert compute_sss(100000).employee == pytest.approx(1350)
    assert compute_sss(20000).employer == compute_sss(20000).employee


def test_philhealth_and_pagibig():
    assert compute_philhealth(20000).employee == pytest.approx(300)
    assert compute_pagibig(3000).employee == pytest.approx(60)
    assert compute_pagibig(20000).employee == 100


def test_withholding_tax_table():
    assert compute_withholding_tax(20000) == 0
    assert compute_withholding_tax(30000) == pytest.approx(1833.4)
    assert compute_withholding_tax(50000) == pytest.approx(6666.75)
    assert compute_withholding_tax(700000) == pytest.approx(200833.33 + 33333 * 0.35)


def test_monthly_basis_for_daily_and_hourly():
    march = date(2025, 3, 3)
    assert monthly_pay_basis(make_employee(basic_salary=650), march) == 650 * 21
    assert monthly_pay_basis(make_employee(basic_salary=100, salary_type=SalaryType.HOURLY), march) == 100 * 8 * 21
    assert monthly_pay_basis(make_employee(basic_salary=30000, salary_type=SalaryType.MONTHLY), march) == 30000


def test_schedule_without_workdays_uses_26_days():
    employee = make_employee(basic_salary=500, schedule=build_weekly_schedule(workdays=()))
    assert monthly_pay_basis(employee, date(2025, 3, 3)) == 500 * 26


def test_toggle_portion():
    assert GovernmentDeductionToggle().portion(100) == 100
    assert GovernmentDeductionToggle(frequency=DeductionFrequency.HALF).portion(100) == 50
    assert GovernmentDeductionToggle(enabled=False).portion(100) == 0


def test_run_status_transitions():
    S = PayrollRunStatus
    assert can_transition(S.DRAFT, S.FINALIZED)
    assert can_transition(S.FINALIZED, S.DRAFT)
    assert can_transition(S.PAID, S.ARCHIVED)
    assert not can_transition(S.DRAFT, S.PAID)
    assert not can_transition(S.CANCELLED, S.DRAFT)
    with pytest.raises(BusinessRuleViolation):
        ensure_transition(S.ARCHIVED, S.DRAFT)
