"""Three-layer rate lookup: employee override, then organisation, then default."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TypeVar

from ..core.constants import DEFAULT_PAYROLL_RATES
from ..employees.model import Compensation
from .model import PayrollSettings

T = TypeVar("T")


def resolve_rate(employee_value: Optional[T], org_value: Optional[T], default: T) -> T:
    """Return the first layer that is set. 0 counts as set."""
    if employee_value is not None:
        return employee_value
    if org_value is not None:
        return org_value
    return default


@dataclass(frozen=True)
class RateTable:
    regular_holiday_rate: float
    special_holiday_rate: float
    night_diff_percent: float
    overtime_regular_rate: float
    overtime_rest_day_rate: float
    regular_holiday_ot_rate: float
    special_holiday_ot_rate: float


def resolve_rates(
    compensation: Optional[Compensation] = None,
    payroll_settings: Optional[PayrollSettings] = None,
) -> RateTable:
    values = {}
    for name, default in DEFAULT_PAYROLL_RATES.items():
        values[name] = float(
            resolve_rate(
                getattr(compensation, name, None),
                getattr(payroll_settings, name, None),
                default,
            )
        )
    return RateTable(**values)


def org_rate_defaults(payroll_settings: Optional[PayrollSettings] = None) -> RateTable:
    """Organisation layer over built-in defaults, used when an import leaves a rate blank."""
    return resolve_rates(None, payroll_settings)
