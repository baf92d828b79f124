from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import DEFAULT_LEAVE_TYPES, PAID_LEAVE_TYPES


@dataclass(frozen=True)
class PayrollSettings:
    """Organisation-level rate defaults (decimals). None falls through to built-in defaults."""

    regular_holiday_rate: Optional[float] = None
    special_holiday_rate: Optional[float] = None
    night_diff_percent: Optional[float] = None
    overtime_regular_rate: Optional[float] = None
    overtime_rest_day_rate: Optional[float] = None
    regular_holiday_ot_rate: Optional[float] = None
    special_holiday_ot_rate: Optional[float] = None


@dataclass(frozen=True)
class LeaveType:
    type: str
    name: str
    default_credits: float
    is_paid: bool
    requires_approval: bool = True


@dataclass(frozen=True)
class OrganizationSettings:
    organization_id: int
    departments: tuple[str, ...] = ()
    payroll_settings: PayrollSettings = field(default_factory=PayrollSettings)
    leave_types: tuple[LeaveType, ...] = field(default_factory=lambda: default_leave_types())
    prorated_leave: bool = False

    def is_paid_leave(self, leave_type: str) -> bool:
        for lt in self.leave_types:
            if lt.type == leave_type:
                return lt.is_paid
        return leave_type in PAID_LEAVE_TYPES


def default_leave_types() -> tuple[LeaveType, ...]:
    return tuple(LeaveType(**raw) for raw in DEFAULT_LEAVE_TYPES)
