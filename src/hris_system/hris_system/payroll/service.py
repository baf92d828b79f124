from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_period, month_bounds
from ..core.enums import LineItemType, PayrollRunStatus, Role
from ..core.exceptions import AuthorizationError, BusinessRuleViolation, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.service import HolidayService
from ..settings.rates import resolve_rates
from ..settings.service import SettingsService
from .calculator.base import PayComputation, PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .contributions import (
    compute_pagibig,
    compute_philhealth,
    compute_sss,
    compute_withholding_tax,
    monthly_pay_basis,
)
from .model import GovernmentDeductionSettings, LineItem, PayrollRun, PayrollRunSpec, Payslip, PayslipEdit
from .repository import PayrollRepository
from .status import ensure_transition

logger = logging.getLogger(__name__)

PAYROLL_ROLES = frozenset({Role.OWNER, Role.ADMIN, Role.HR, Role.ACCOUNTING})

PREVIOUS_PENDING_LINE = "Previous Pending Deductions"

_UPDATABLE_RUN_FIELDS = frozenset(f.name for f in fields(PayrollRunSpec)) - {"organization_id"}


def _money(value: float) -> float:
    return round(float(value) + 0.0, 2)


def _require_payroll_role(current_role) -> None:
    try:
        role = Role(current_role)
    except ValueError:
        raise AuthorizationError("Unknown role") from None
    if role not in PAYROLL_ROLES:
        raise AuthorizationError("Only owner, admin, hr or accounting can manage payroll")


def cap_deductions(lines: Sequence[LineItem], gross: float) -> tuple[list[LineItem], float]:
    """Trim lines from the end until they fit in ``gross``; returns (kept, moved amount)."""
    kept = list(lines)
    excess = _money(sum(d.amount for d in kept) - max(gross, 0.0))
    moved = 0.0
    while excess > 0 and kept:
        last = kept.pop()
        if last.amount <= excess:
            moved += last.amount
            excess = _money(excess - last.amount)
        else:
            kept.append(replace(last, amount=_money(last.amount - excess)))
            moved += excess
            excess = 0.0
    return kept, _money(moved)


def _plural_days(count: int) -> str:
    return f"{count} {'day' if count == 1 else 'days'}"


def describe_line_changes(kind: str, old: Sequence[LineItem], new: Sequence[LineItem]) -> list[str]:
    """Human readable diff of two line lists, matched by name."""
    before = {line.name: line for line in old}
    after = {line.name: line for line in new}
    changes = []
    for name, line in after.items():
        if name not in before:
            changes.append(f"Added {kind}: {name} ({line.amount:.2f})")
        elif before[name].amount != line.amount:
            changes.append(f"Modified {kind}: {name} ({before[name].amount:.2f} to {line.amount:.2f})")
    for name, line in before.items():
        if name not in after:
            changes.append(f"Removed {kind}: {name} ({line.amount:.2f})")
    return changes


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        settings: SettingsService,
        holidays: HolidayService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._attendance = attendance
        self._employees = employees
        self._settings = settings
        self._holidays = holidays
        self._calculator = calculator or StandardPayrollCalculator()

    # -- computation --------------------------------------------------

    def compute_employee_payroll(
        self,
        employee: Employee,
        *,
        cutoff_start: date,
        cutoff_end: date,
        deductions_enabled: bool = True,
        manual_deductions: Iterable[LineItem] = (),
        government_settings: Optional[GovernmentDeductionSettings] = None,
        incentives: Iterable[LineItem] = (),
        paid_leave_dates: Iterable[date] = (),
        non_taxable_allowance: Optional[float] = None,
        exclude_run_id: Optional[int] = None,
    ) -> Payslip:
        """Preview one employee's payslip for a cutoff. Nothing is written.

        ``exclude_run_id`` keeps a run being recomputed from carrying its own
        stale pending amount forward.
        """
        if cutoff_start > cutoff_end:
            raise BusinessRuleViolation("Cutoff start must be before or equal to cutoff end")

        org = employee.organization_id
        org_settings = self._settings.get_settings(org)
        rates = resolve_rates(employee.compensation, org_settings.payroll_settings)
        records = self._attendance.list_range(
            organization_id=org, start_date=cutoff_start, end_date=cutoff_end, employee_id=employee.employee_id
        )
        pay = self._calculator.compute(
            employee,
            cutoff_start=cutoff_start,
            cutoff_end=cutoff_end,
            records=records,
            holidays=self._holidays.holidays_between(org, cutoff_start, cutoff_end),
            rates=rates,
            paid_leave_dates=frozenset(paid_leave_dates),
        )

        incentive_lines = tuple(replace(i, amount=_money(i.amount)) for i in incentives)
        gross = _money(pay.base_pay + sum(i.amount for i in incentive_lines))
        worked = pay.days_worked > 0

        lines: list[LineItem] = []
        pending = 0.0
        employer: dict[str, float] = {}

        if deductions_enabled:
            government, employer, unpaid = self._government_lines(
                employee, cutoff_start, gross, government_settings or GovernmentDeductionSettings()
            )
            if worked:
                lines.extend(government)
            else:
                pending += unpaid

        lines.extend(replace(d, amount=_money(d.amount)) for d in manual_deductions)
        for recurring in employee.recurring_deductions:
            if recurring.applies_to(cutoff_start, cutoff_end):
                lines.append(LineItem(recurring.name, _money(recurring.amount_per_cutoff()), recurring.type))

        if deductions_enabled:
            lines.extend(self._attendance_lines(pay))

        previous = self._previous_pending(employee.employee_id, cutoff_start, exclude_run_id=exclude_run_id)
        if previous > 0:
            if worked:
                lines.append(LineItem(PREVIOUS_PENDING_LINE, previous, LineItemType.GOVERNMENT.value))
            else:
                pending += previous

        lines = [line for line in lines if line.amount > 0]
        lines, moved = cap_deductions(lines, gross)
        pending += moved

        allowance = non_taxable_allowance
        if allowance is None:
            allowance = employee.compensation.allowance or 0.0

        return Payslip(
            payslip_id=0,
            payroll_run_id=0,
            organization_id=org,
            employee_id=employee.employee_id,
            period=format_period(cutoff_start, cutoff_end),
            period_start=cutoff_start,
            base_pay=_money(pay.base_pay),
            gross_pay=gross,
            deductions=tuple(lines),
            incentives=incentive_lines,
            net_pay=_money(gross - sum(d.amount for d in lines)),
            non_taxable_allowance=_money(allowance),
            pending_deductions=_money(pending),
            days_worked=pay.days_worked,
            absences=pay.absences,
            late_hours=round(pay.late_hours, 4),
            undertime_hours=round(pay.undertime_hours, 4),
            overtime_hours=pay.overtime_hours,
            holiday_pay=_money(pay.holiday_pay),
            rest_day_pay=_money(pay.rest_day_pay),
            night_diff_pay=_money(pay.night_diff_pay),
            overtime_pay=_money(pay.overtime_pay),
            paid_leave_pay=_money(pay.paid_leave_pay),
            employer_contributions=employer,
        )

    def _government_lines(
        self,
        employee: Employee,
        cutoff_start: date,
        gross: float,
        gov: GovernmentDeductionSettings,
    ) -> tuple[list[LineItem], dict[str, float], float]:
        """Returns (lines, employer shares, contributions to hold when nothing was worked)."""
        basis = monthly_pay_basis(employee, cutoff_start)
        sss = compute_sss(basis)
        philhealth = compute_philhealth(basis)
        pagibig = compute_pagibig(basis)

        taxable = gross
        for toggle, share in ((gov.sss, sss), (gov.philhealth, philhealth), (gov.pagibig, pagibig)):
            if toggle.enabled:
                taxable -= share.employee
        tax = compute_withholding_tax(taxable)

        amounts = (
            ("SSS", gov.sss.portion(sss.employee)),
            ("PhilHealth", gov.philhealth.portion(philhealth.employee)),
            ("Pag-IBIG", gov.pagibig.portion(pagibig.employee)),
            ("Withholding Tax", gov.tax.portion(tax)),
        )
        lines = [LineItem(name, _money(amount), LineItemType.GOVERNMENT.value) for name, amount in amounts]
        employer = {
            "SSS": _money(gov.sss.portion(sss.employer)),
            "PhilHealth": _money(gov.philhealth.portion(philhealth.employer)),
            "Pag-IBIG": _money(gov.pagibig.portion(pagibig.employer)),
        }
        unpaid = _money(sum(line.amount for line in lines[:3]))
        return lines, employer, unpaid

    @staticmethod
    def _attendance_lines(pay: PayComputation) -> list[LineItem]:
        kind = LineItemType.ATTENDANCE.value
        lines = [
            LineItem("Late", _money(pay.late_deduction), kind),
            LineItem("Undertime", _money(pay.undertime_deduction), kind),
        ]
        if pay.absences and pay.absent_deduction > 0:
            lines.append(LineItem(f"Absent ({_plural_days(pay.absences)})", _money(pay.absent_deduction), kind))
        return lines

    def _previous_pending(
        self, employee_id: int, cutoff_start: date, *, exclude_run_id: Optional[int] = None
    ) -> float:
        """Pending amount of the latest earlier payslip in the same month."""
        month_start, _ = month_bounds(cutoff_start)
        earlier = [
            p
            for p in self._payroll.list_payslips_for_employee(employee_id, since=month_start)
            if p.period_start < cutoff_start and p.pending_deductions > 0 and p.payroll_run_id != exclude_run_id
        ]
        if not earlier:
            return 0.0
        latest = max(earlier, key=lambda p: p.period_start)
        return _money(latest.pending_deductions)

    def _compute_run(self, spec: PayrollRunSpec, *, exclude_run_id: Optional[int] = None) -> list[Payslip]:
        if spec.cutoff_start > spec.cutoff_end:
            raise BusinessRuleViolation("Cutoff start must be before or equal to cutoff end")
        if not spec.employee_ids:
            raise ValidationError("Select at least one employee", field="employee_ids")

        payslips = []
        for employee_id in spec.employee_ids:
            employee = self._employees.get_by_id(int(employee_id))
            if not employee or employee.organization_id != spec.organization_id:
                raise NotFoundError(f"Employee not found: {employee_id}")
            payslips.append(
                self.compute_employee_payroll(
                    employee,
                    cutoff_start=spec.cutoff_start,
                    cutoff_end=spec.cutoff_end,
                    deductions_enabled=spec.deductions_enabled,
                    manual_deductions=spec.manual_deductions.get(employee.employee_id, ()),
                    government_settings=spec.government_settings.get(employee.employee_id),
                    incentives=spec.incentives.get(employee.employee_id, ()),
                    paid_leave_dates=spec.paid_leave_dates.get(employee.employee_id, ()),
                    exclude_run_id=exclude_run_id,
                )
            )
        return payslips

    def _store_payslips(self, run_id: int, payslips: Iterable[Payslip]) -> None:
        now = datetime.now()
        for payslip in payslips:
            self._payroll.create_payslip(replace(payslip, payroll_run_id=run_id, created_at=now))

    # -- runs ---------------------------------------------------------

    def create_payroll_run(self, spec: PayrollRunSpec) -> PayrollRun:
        # every payslip is computed before the run is stored
        payslips = self._compute_run(spec)
        run_id = self._payroll.create_run(spec, period=format_period(spec.cutoff_start, spec.cutoff_end))
        self._store_payslips(run_id, payslips)
        logger.info(
            "[payroll] org=%s run=%s created for %s employee(s), period %s to %s",
            spec.organization_id,
            run_id,
            len(payslips),
            spec.cutoff_start,
            spec.cutoff_end,
        )
        return self.get_payroll_run(run_id)

    def get_payroll_run(self, run_id: int) -> PayrollRun:
        run = self._payroll.get_run(int(run_id))
        if not run:
            raise NotFoundError("Payroll run not found")
        return run

    def get_payroll_runs(self, organization_id: int) -> list[PayrollRun]:
        runs = list(self._payroll.list_runs(int(organization_id)))
        runs.sort(key=lambda r: (r.cutoff_start, r.run_id), reverse=True)
        return runs

    def get_payslips(self, run_id: int) -> list[Payslip]:
        self.get_payroll_run(run_id)
        return list(self._payroll.list_payslips(int(run_id)))

    def get_payslip(self, payslip_id: int) -> Payslip:
        payslip = self._payroll.get_payslip(int(payslip_id))
        if not payslip:
            raise NotFoundError("Payslip not found")
        return payslip

    def update_payroll_run(self, run_id: int, changes: Mapping[str, Any]) -> PayrollRun:
        """Change a draft run's inputs and recompute all of its payslips."""
        run = self.get_payroll_run(run_id)
        if run.status != PayrollRunStatus.DRAFT:
            raise BusinessRuleViolation("Only draft payroll runs can be updated")
        unknown = set(changes) - _UPDATABLE_RUN_FIELDS
        if unknown:
            raise ValidationError(f"Unknown payroll run field(s): {', '.join(sorted(unknown))}")

        spec = replace(run.spec, **dict(changes))
        payslips = self._compute_run(spec, exclude_run_id=run.run_id)
        self._payroll.delete_payslips(run.run_id)
        self._store_payslips(run.run_id, payslips)
        updated = replace(
            run,
            spec=spec,
            period=format_period(spec.cutoff_start, spec.cutoff_end),
            updated_at=datetime.now(),
        )
        self._payroll.save_run(updated)
        logger.info("[payroll] run=%s recomputed (%s)", run.run_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def update_payroll_run_status(
        self,
        run_id: int,
        status: PayrollRunStatus | str,
        *,
        current_role,
        processed_by: Optional[int] = None,
    ) -> PayrollRun:
        _require_payroll_role(current_role)
        run = self.get_payroll_run(run_id)
        try:
            target = PayrollRunStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid payroll status: {status!r}", field="status") from None
        ensure_transition(run.status, target)

        now = datetime.now()
        updated = replace(run, status=target, updated_at=now)
        if target == PayrollRunStatus.FINALIZED:
            updated = replace(updated, processed_at=now, processed_by=processed_by or run.processed_by)
        self._payroll.save_run(updated)
        logger.info("[payroll] run=%s status %s -> %s", run.run_id, run.status.value, target.value)
        return updated

    def delete_payroll_run(self, run_id: int) -> None:
        run = self.get_payroll_run(run_id)
        if run.status not in (PayrollRunStatus.DRAFT, PayrollRunStatus.CANCELLED):
            raise BusinessRuleViolation("Only draft or cancelled payroll runs can be deleted")
        self._payroll.delete_payslips(run.run_id)
        self._payroll.delete_run(run.run_id)
        logger.info("[payroll] run=%s deleted", run.run_id)

    # -- payslip edits ------------------------------------------------

    def update_payslip(
        self,
        payslip_id: int,
        *,
        current_role,
        edited_by: Optional[int] = None,
        deductions: Optional[Iterable[LineItem]] = None,
        incentives: Optional[Iterable[LineItem]] = None,
        non_taxable_allowance: Optional[float] = None,
    ) -> Payslip:
        """Hand-edit a payslip of a draft run.

        Gross keeps its computed earnings and swaps the old incentives for the
        new ones; net is recomputed from the resulting lines.
        """
        _require_payroll_role(current_role)
        payslip = self.get_payslip(payslip_id)
        run = self.get_payroll_run(payslip.payroll_run_id)
        if run.status != PayrollRunStatus.DRAFT:
            raise BusinessRuleViolation("Payslips can only be edited while the payroll run is a draft")

        new_deductions = payslip.deductions if deductions is None else tuple(deductions)
        new_incentives = payslip.incentives if incentives is None else tuple(incentives)
        for line in new_deductions + new_incentives:
            if line.amount < 0:
                raise ValidationError(f"{line.name} cannot be negative", field="amount")

        gross = _money(payslip.gross_pay - payslip.total_incentives + sum(i.amount for i in new_incentives))
        net = _money(gross - sum(d.amount for d in new_deductions))
        if net < 0:
            raise BusinessRuleViolation("Deductions cannot exceed gross pay")

        changes = describe_line_changes("deduction", payslip.deductions, new_deductions)
        changes += describe_line_changes("incentive", payslip.incentives, new_incentives)
        allowance = payslip.non_taxable_allowance
        if non_taxable_allowance is not None and _money(non_taxable_allowance) != allowance:
            if non_taxable_allowance < 0:
                raise ValidationError("Non-taxable allowance cannot be negative", field="non_taxable_allowance")
            changes.append(f"Modified allowance: {allowance:.2f} to {float(non_taxable_allowance):.2f}")
            allowance = _money(non_taxable_allowance)

        history = payslip.edit_history
        if changes:
            history = history + (PayslipEdit(edited_by=edited_by, edited_at=datetime.now(), changes="; ".join(changes)),)

        updated = replace(
            payslip,
            gross_pay=gross,
            deductions=new_deductions,
            incentives=new_incentives,
            net_pay=net,
            non_taxable_allowance=allowance,
            edit_history=history,
        )
        self._payroll.save_payslip(updated)
        return updated
