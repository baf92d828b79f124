from datetime import date

import pytest

from hris_system.core.enums import DeductionFrequency, PayrollRunStatus, RecurringFrequency, SalaryType
from hris_system.core.exceptions import AuthorizationError, BusinessRuleViolation, NotFoundError, ValidationError
from hris_system.employees.model import RecurringDeduction
from hris_system.payroll.model import (
    GovernmentDeductionSettings,
    GovernmentDeductionToggle,
    LineItem,
    PayrollRunSpec,
)
from hris_system.payroll.service import PREVIOUS_PENDING_LINE, cap_deductions, describe_line_changes

from tests.factories import add_employee, entry

MONDAY = date(2025, 3, 3)
FRIDAY = date(2025, 3, 7)


def _work_week(container, employee, start_day=3, **per_day):
    for d in range(start_day, start_day + 5):
        day = date(2025, 3, d)
        kwargs = per_day.get(day.isoformat(), {})
        if kwargs is None:
            continue
        container.attendance_service.create_attendance(entry(employee, day, **kwargs))


def _amounts(payslip):
    return {line.name: line.amount for line in payslip.deductions}


def _preview(container, employee, **kwargs):
    return container.payroll_service.compute_employee_payroll(
        employee, cutoff_start=MONDAY, cutoff_end=FRIDAY, **kwargs
    )


def _run(container, employee_ids, *, start=MONDAY, end=FRIDAY, **kwargs):
    spec = PayrollRunSpec(
        organization_id=1, cutoff_start=start, cutoff_end=end, employee_ids=tuple(employee_ids), **kwargs
    )
    return container.payroll_service.create_payroll_run(spec)


def test_without_deductions_net_equals_gross(container):
    employee = add_employee(container)
    _work_week(container, employee)

    payslip = _preview(container, employee, deductions_enabled=False)

    assert payslip.gross_pay == 3250
    assert payslip.deductions == ()
    assert payslip.net_pay == 3250
    assert payslip.days_worked == 5


def test_government_lines_for_daily_employee(container):
    employee = add_employee(container)
    _work_week(container, employee)

    payslip = _preview(container, employee)

    assert _amounts(payslip) == {"SSS": 607.5, "PhilHealth": 204.75, "Pag-IBIG": 100}
    assert payslip.net_pay == 2337.75
    assert payslip.employer_contributions["SSS"] == 607.5
    assert payslip.net_pay == pytest.approx(payslip.gross_pay - payslip.total_deductions)


def test_half_frequency_and_disabled_toggles(container):
    employee = add_employee(container)
    _work_week(container, employee)
    gov = GovernmentDeductionSettings(
        sss=GovernmentDeductionToggle(frequency=DeductionFrequency.HALF),
        philhealth=GovernmentDeductionToggle(enabled=False),
    )

    payslip = _preview(container, employee, government_settings=gov)

    assert _amounts(payslip) == {"SSS": 303.75, "Pag-IBIG": 100}


def test_monthly_employee_absence_line_and_allowance(container):
    employee = add_employee(container, basic_salary=30000, salary_type=SalaryType.MONTHLY, allowance=2000)
    _work_week(container, employee, **{"2025-03-05": None})

    payslip = _preview(container, employee)

    assert _amounts(payslip) == {"SSS": 1350, "PhilHealth": 450, "Pag-IBIG": 100, "Absent (1 day)": 3000}
    assert payslip.gross_pay == 15000
    assert payslip.net_pay == 10100
    assert payslip.non_taxable_allowance == 2000
    assert payslip.take_home_pay == 12100


def test_deduction_lines_keep_their_order(container):
    loan = RecurringDeduction(name="Salary Loan", amount=1000, frequency=RecurringFrequency.MONTHLY)
    employee = add_employee(container, recurring_deductions=[loan])
    _work_week(container, employee, **{"2025-03-03": {"actual_in": "09:15"}})

    payslip = _preview(container, employee, manual_deductions=[LineItem("Uniform", 150)])

    assert [line.name for line in payslip.deductions] == [
        "SSS",
        "PhilHealth",
        "Pag-IBIG",
        "Uniform",
        "Salary Loan",
        "Late",
    ]
    assert _amounts(payslip)["Salary Loan"] == 500
    assert _amounts(payslip)["Late"] == 20.31


def test_inactive_or_expired_recurring_deductions_are_skipped(container):
    expired = RecurringDeduction(name="Old Loan", amount=300, end_date=date(2025, 2, 28))
    paused = RecurringDeduction(name="Paused", amount=300, is_active=False)
    employee = add_employee(container, recurring_deductions=[expired, paused])
    _work_week(container, employee)

    payslip = _preview(container, employee, deductions_enabled=False)

    assert payslip.deductions == ()


def test_incentives_add_to_gross(container):
    employee = add_employee(container)
    _work_week(container, employee)

    payslip = _preview(container, employee, deductions_enabled=False, incentives=[LineItem("Bonus", 500, "incentive")])

    assert payslip.base_pay == 3250
    assert payslip.gross_pay == 3750
    assert payslip.total_incentives == 500


def test_deductions_over_gross_move_to_pending(container):
    employee = add_employee(container)
    container.attendance_service.create_attendance(entry(employee, MONDAY))

    payslip = container.payroll_service.compute_employee_payroll(
        employee,
        cutoff_start=MONDAY,
        cutoff_end=MONDAY,
        manual_deductions=[LineItem("Cash Advance", 2000)],
    )

    assert payslip.gross_pay == 650
    assert payslip.net_pay == 0
    assert payslip.pending_deductions == pytest.approx(2262.25)
    assert _amounts(payslip) == {"SSS": 607.5, "PhilHealth": pytest.approx(42.5)}


def test_cap_deductions_trims_from_the_end():
    kept, moved = cap_deductions([LineItem("A", 100), LineItem("B", 50), LineItem("C", 30)], 120)
    assert [(line.name, line.amount) for line in kept] == [("A", 100), ("B", 20)]
    assert moved == 60

    kept, moved = cap_deductions([LineItem("A", 100)], 500)
    assert moved == 0 and kept[0].amount == 100


def test_previous_pending_carries_into_next_cutoff(container):
    employee = add_employee(container)
    first = _run(container, [employee.employee_id])
    first_slip = container.payroll_service.get_payslips(first.run_id)[0]

    assert first_slip.days_worked == 0
    assert first_slip.deductions == ()
    assert first_slip.pending_deductions == 912.25

    _work_week(container, employee, start_day=10)
    second = _run(container, [employee.employee_id], start=date(2025, 3, 10), end=date(2025, 3, 14))
    second_slip = container.payroll_service.get_payslips(second.run_id)[0]

    assert _amounts(second_slip)[PREVIOUS_PENDING_LINE] == 912.25
    assert second_slip.net_pay == 1425.5


def test_moving_a_draft_cutoff_does_not_carry_its_own_pending(container):
    employee = add_employee(container)
    run = _run(container, [employee.employee_id])
    assert container.payroll_service.get_payslips(run.run_id)[0].pending_deductions == 912.25

    _work_week(container, employee, start_day=10)
    container.payroll_service.update_payroll_run(
        run.run_id, {"cutoff_start": date(2025, 3, 10), "cutoff_end": date(2025, 3, 14)}
    )

    payslip = container.payroll_service.get_payslips(run.run_id)[0]
    assert PREVIOUS_PENDING_LINE not in _amounts(payslip)
    assert payslip.pending_deductions == 0
    assert payslip.net_pay == 2337.75


def test_create_run_validates_inputs(container):
    employee = add_employee(container)
    outsider = add_employee(container, organization_id=2, first_name="Jose")

    with pytest.raises(BusinessRuleViolation):
        _run(container, [employee.employee_id], start=FRIDAY, end=MONDAY)
    with pytest.raises(ValidationError):
        _run(container, [])
    with pytest.raises(NotFoundError):
        _run(container, [employee.employee_id, outsider.employee_id])
    assert container.payroll_service.get_payroll_runs(1) == []


def test_run_lifecycle_and_roles(container):
    employee = add_employee(container)
    _work_week(container, employee)
    run = _run(container, [employee.employee_id], processed_by=5)
    service = container.payroll_service

    with pytest.raises(AuthorizationError):
        service.update_payroll_run_status(run.run_id, "finalized", current_role="employee")
    with pytest.raises(AuthorizationError):
        service.update_payroll_run_status(run.run_id, "finalized", current_role=None)
    with pytest.raises(BusinessRuleViolation):
        service.update_payroll_run_status(run.run_id, "paid", current_role="hr")

    finalized = service.update_payroll_run_status(run.run_id, "finalized", current_role="accounting", processed_by=9)
    assert finalized.status == PayrollRunStatus.FINALIZED
    assert finalized.processed_by == 9
    assert finalized.processed_at is not None

    with pytest.raises(BusinessRuleViolation):
        service.delete_payroll_run(run.run_id)
    with pytest.raises(BusinessRuleViolation):
        service.update_payroll_run(run.run_id, {"deductions_enabled": False})

    service.update_payroll_run_status(run.run_id, "cancelled", current_role="owner")
    service.delete_payroll_run(run.run_id)
    with pytest.raises(NotFoundError):
        service.get_payroll_run(run.run_id)


def test_update_draft_run_recomputes_payslips(container):
    employee = add_employee(container)
    _work_week(container, employee)
    run = _run(container, [employee.employee_id])
    service = container.payroll_service

    updated = service.update_payroll_run(run.run_id, {"deductions_enabled": False})

    payslips = service.get_payslips(run.run_id)
    assert updated.spec.deductions_enabled is False
    assert len(payslips) == 1
    assert payslips[0].net_pay == 3250
    with pytest.raises(ValidationError):
        service.update_payroll_run(run.run_id, {"organization_id": 2})


def test_payslip_edit_records_history(container):
    employee = add_employee(container)
    _work_week(container, employee)
    run = _run(container, [employee.employee_id], deductions_enabled=False)
    payslip = container.payroll_service.get_payslips(run.run_id)[0]

    edited = container.payroll_service.update_payslip(
        payslip.payslip_id,
        current_role="hr",
        edited_by=3,
        incentives=[LineItem("Bonus", 500, "incentive")],
        deductions=[LineItem("Uniform", 250)],
        non_taxable_allowance=1000,
    )

    assert edited.gross_pay == 3750
    assert edited.net_pay == 3500
    assert edited.take_home_pay == 4500
    assert edited.edit_history[-1].edited_by == 3
    assert edited.edit_history[-1].changes == (
        "Added deduction: Uniform (250.00); Added incentive: Bonus (500.00); Modified allowance: 0.00 to 1000.00"
    )


def test_payslip_edit_rules(container):
    employee = add_employee(container)
    _work_week(container, employee)
    run = _run(container, [employee.employee_id], deductions_enabled=False)
    service = container.payroll_service
    payslip = service.get_payslips(run.run_id)[0]

    with pytest.raises(BusinessRuleViolation):
        service.update_payslip(payslip.payslip_id, current_role="hr", deductions=[LineItem("Huge", 5000)])
    with pytest.raises(ValidationError):
        service.update_payslip(payslip.payslip_id, current_role="hr", deductions=[LineItem("Refund", -5)])
    with pytest.raises(AuthorizationError):
        service.update_payslip(payslip.payslip_id, current_role="employee")

    service.update_payroll_run_status(run.run_id, "finalized", current_role="admin")
    with pytest.raises(BusinessRuleViolation):
        service.update_payslip(payslip.payslip_id, current_role="hr", deductions=[])


def test_describe_line_changes():
    old = [LineItem("SSS", 100), LineItem("Loan", 50)]
    new = [LineItem("SSS", 120), LineItem("Meal", 30)]
    assert describe_line_changes("deduction", old, new) == [
        "Modified deduction: SSS (100.00 to 120.00)",
        "Added deduction: Meal (30.00)",
        "Removed deduction: Loan (50.00)",
    ]
