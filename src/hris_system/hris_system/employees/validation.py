"""Field rules shared by the single-employee form and the CSV import.

Values arrive as strings keyed by the CSV column names (camelCase).
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from ..common.validators import EMAIL_RE
from ..core.enums import EmploymentType, SalaryType

REQUIRED_FIELDS = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "email": "Email is required",
    "position": "Position is required",
    "department": "Department is required",
    "employmentType": "Employment type is required",
    "hireDate": "Hire date is required",
    "basicSalary": "Basic salary is required",
    "salaryType": "Salary type is required",
}

NUMERIC_LABELS = {
    "basicSalary": "Basic salary",
    "allowance": "Allowance",
    "regularHolidayRate": "Regular holiday rate",
    "specialHolidayRate": "Special non-working holiday rate",
    "nightDiffPercent": "Night differential",
    "overtimeRegularRate": "Overtime regular rate",
    "overtimeRestDayRate": "Overtime rest day rate",
    "regularHolidayOtRate": "Regular holiday OT rate",
    "specialHolidayOtRate": "Special non-working holiday OT rate",
}

# CSV column -> Compensation attribute
RATE_COLUMNS = {
    "regularHolidayRate": "regular_holiday_rate",
    "specialHolidayRate": "special_holiday_rate",
    "nightDiffPercent": "night_diff_percent",
    "overtimeRegularRate": "overtime_regular_rate",
    "overtimeRestDayRate": "overtime_rest_day_rate",
    "regularHolidayOtRate": "regular_holiday_ot_rate",
    "specialHolidayOtRate": "special_holiday_ot_rate",
}
RATE_FIELDS = tuple(RATE_COLUMNS)


def _text(values: Mapping[str, Optional[str]], key: str) -> str:
    value = values.get(key)
    return "" if value is None else str(value).strip()


def _is_number(value: str) -> bool:
    try:
        number = float(value)
    except ValueError:
        return False
    return number == number


def validate_employee_form(values: Mapping[str, Optional[str]]) -> dict[str, str]:
    """Return ``{field: message}``; empty when the values are acceptable."""
    errors: dict[str, str] = {}

    for key, message in REQUIRED_FIELDS.items():
        if not _text(values, key):
            errors[key] = message

    email = _text(values, "email")
    if email and not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email address"

    for key, label in NUMERIC_LABELS.items():
        raw = _text(values, key)
        if raw and not _is_number(raw):
            errors[key] = f"{label} must be a valid number"
        elif raw and float(raw) < 0:
            errors[key] = f"{label} cannot be negative"

    employment_type = _text(values, "employmentType")
    if employment_type and employment_type not in {e.value for e in EmploymentType}:
        errors["employmentType"] = "Employment type must be one of: " + ", ".join(e.value for e in EmploymentType)

    salary_type = _text(values, "salaryType")
    if salary_type and salary_type not in {s.value for s in SalaryType}:
        errors["salaryType"] = "Salary type must be one of: " + ", ".join(s.value for s in SalaryType)

    hire_date = _text(values, "hireDate")
    if hire_date:
        try:
            datetime.strptime(hire_date, "%Y-%m-%d")
        except ValueError:
            errors["hireDate"] = "Hire date must be a valid date (YYYY-MM-DD)"

    return errors
