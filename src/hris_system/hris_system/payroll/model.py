from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DeductionFrequency, LineItemType, PayrollRunStatus


@dataclass(frozen=True)
class LineItem:
    """One deduction or incentive line on a payslip."""

    name: str
    amount: float
    type: str = LineItemType.OTHER.value


@dataclass(frozen=True)
class GovernmentDeductionToggle:
    enabled: bool = True
    frequency: DeductionFrequency = DeductionFrequency.FULL

    def portion(self, amount: float) -> float:
        if not self.enabled:
            return 0.0
        return amount / 2 if self.frequency == DeductionFrequency.HALF else amount


@dataclass(frozen=True)
class GovernmentDeductionSettings:
    """Per-employee switches for the four statutory deductions of one run."""

    sss: GovernmentDeductionToggle = GovernmentDeductionToggle()
    philhealth: GovernmentDeductionToggle = GovernmentDeductionToggle()
    pagibig: GovernmentDeductionToggle = GovernmentDeductionToggle()
    tax: GovernmentDeductionToggle = GovernmentDeductionToggle()


@dataclass(frozen=True)
class PayrollRunSpec:
    """Everything needed to compute a run. Per-employee maps are keyed by employee id."""

    organization_id: int
    cutoff_start: date
    cutoff_end: date
    employee_ids: tuple[int, ...]
    deductions_enabled: bool = True
    manual_deductions: dict[int, tuple[LineItem, ...]] = field(default_factory=dict)
    government_settings: dict[int, GovernmentDeductionSettings] = field(default_factory=dict)
    incentives: dict[int, tuple[LineItem, ...]] = field(default_factory=dict)
    paid_leave_dates: dict[int, frozenset[date]] = field(default_factory=dict)
    processed_by: Optional[int] = None


@dataclass(frozen=True)
class PayrollRun:
    run_id: int
    spec: PayrollRunSpec
    period: str
    status: PayrollRunStatus = PayrollRunStatus.DRAFT
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def organization_id(self) -> int:
        return self.spec.organization_id

    @property
    def cutoff_start(self) -> date:
        return self.spec.cutoff_start

    @property
    def cutoff_end(self) -> date:
        return self.spec.cutoff_end


@dataclass(frozen=True)
class PayslipEdit:
    edited_by: Optional[int]
    edited_at: datetime
    changes: str


@dataclass(frozen=True)
class Payslip:
    """Result of one employee in one run.

    ``net_pay`` is ``gross_pay`` minus the deduction lines; the allowance sits
    outside both and only enters ``take_home_pay``.
    """

    payslip_id: int
    payroll_run_id: int
    organization_id: int
    employee_id: int
    period: str
    period_start: date
    base_pay: float
    gross_pay: float
    deductions: tuple[LineItem, ...]
    incentives: tuple[LineItem, ...]
    net_pay: float
    non_taxable_allowance: float = 0.0
    pending_deductions: float = 0.0
    days_worked: float = 0.0
    absences: int = 0
    late_hours: float = 0.0
    undertime_hours: float = 0.0
    overtime_hours: float = 0.0
    holiday_pay: float = 0.0
    rest_day_pay: float = 0.0
    night_diff_pay: float = 0.0
    overtime_pay: float = 0.0
    paid_leave_pay: float = 0.0
    employer_contributions: dict[str, float] = field(default_factory=dict)
    edit_history: tuple[PayslipEdit, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None

    @property
    def total_deductions(self) -> float:
        return sum(d.amount for d in self.deductions)

    @property
    def total_incentives(self) -> float:
        return sum(i.amount for i in self.incentives)

    @property
    def take_home_pay(self) -> float:
        return self.net_pay + self.non_taxable_allowance
