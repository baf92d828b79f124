"""Build payroll inputs from API payloads (camelCase, per-employee lists)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import coerce_date
from ..common.validators import parse_number, require_non_empty, require_non_negative
from ..core.enums import DeductionFrequency, LineItemType
from ..core.exceptions import ValidationError
from .model import GovernmentDeductionSettings, GovernmentDeductionToggle, LineItem, PayrollRunSpec


def line_items_from_payload(items: Optional[Iterable[Mapping[str, Any]]], *, default_type: str) -> tuple[LineItem, ...]:
    lines = []
    for raw in items or ():
        name = require_non_empty(raw.get("name"), "name", message="Line item name is required")
        amount = require_non_negative(parse_number(raw.get("amount"), "amount", label=name), "amount", label=name)
        lines.append(LineItem(name=name.strip(), amount=amount, type=str(raw.get("type") or default_type)))
    return tuple(lines)


def _toggle(raw: Optional[Mapping[str, Any]]) -> GovernmentDeductionToggle:
    if raw is None:
        return GovernmentDeductionToggle()
    try:
        frequency = DeductionFrequency(raw.get("frequency") or DeductionFrequency.FULL.value)
    except ValueError:
        raise ValidationError(f"Invalid frequency: {raw.get('frequency')!r}", field="frequency") from None
    return GovernmentDeductionToggle(enabled=bool(raw.get("enabled", True)), frequency=frequency)


def government_settings_from_payload(raw: Mapping[str, Any]) -> GovernmentDeductionSettings:
    return GovernmentDeductionSettings(
        sss=_toggle(raw.get("sss")),
        philhealth=_toggle(raw.get("philhealth")),
        pagibig=_toggle(raw.get("pagibig")),
        tax=_toggle(raw.get("tax")),
    )


def _per_employee(entries, key: str, build) -> dict:
    out = {}
    for entry in entries or ():
        try:
            employee_id = int(entry["employeeId"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("employeeId is required", field="employeeId") from None
        out[employee_id] = build(entry if key is None else entry.get(key))
    return out


def run_changes_from_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Only the keys present in ``payload``, renamed to PayrollRunSpec fields."""
    changes: dict[str, Any] = {}
    if "cutoffStart" in payload:
        changes["cutoff_start"] = coerce_date(payload["cutoffStart"], "cutoffStart")
    if "cutoffEnd" in payload:
        changes["cutoff_end"] = coerce_date(payload["cutoffEnd"], "cutoffEnd")
    if "employeeIds" in payload:
        try:
            changes["employee_ids"] = tuple(int(e) for e in payload["employeeIds"] or ())
        except (TypeError, ValueError):
            raise ValidationError("employeeIds must be a list of ids", field="employeeIds") from None
    if "deductionsEnabled" in payload:
        changes["deductions_enabled"] = bool(payload["deductionsEnabled"])
    if "manualDeductions" in payload:
        changes["manual_deductions"] = _per_employee(
            payload["manualDeductions"],
            "deductions",
            lambda items: line_items_from_payload(items, default_type=LineItemType.OTHER.value),
        )
    if "governmentDeductionSettings" in payload:
        changes["government_settings"] = _per_employee(
            payload["governmentDeductionSettings"], None, government_settings_from_payload
        )
    if "incentives" in payload:
        changes["incentives"] = _per_employee(
            payload["incentives"],
            "incentives",
            lambda items: line_items_from_payload(items, default_type=LineItemType.INCENTIVE.value),
        )
    if "paidLeaveDates" in payload:
        changes["paid_leave_dates"] = _per_employee(
            payload["paidLeaveDates"],
            "dates",
            lambda dates: frozenset(coerce_date(d, "paidLeaveDates") for d in dates or ()),
        )
    return changes


def run_spec_from_payload(
    payload: Mapping[str, Any], *, organization_id: int, processed_by: Optional[int] = None
) -> PayrollRunSpec:
    changes = run_changes_from_payload(payload)
    for required in ("cutoff_start", "cutoff_end", "employee_ids"):
        if required not in changes:
            raise ValidationError(f"{required} is required", field=required)
    return PayrollRunSpec(organization_id=int(organization_id), processed_by=processed_by, **changes)
