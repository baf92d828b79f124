"""Employee bulk-import template, parsing and export.

Columns are matched by position against EMPLOYEE_CSV_HEADERS. Rate columns
are whole percentages in CSV ("125" = 1.25).
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .model import Employee
from .validation import RATE_COLUMNS, validate_employee_form

EMPLOYEE_CSV_HEADERS = (
    "firstName",
    "lastName",
    "middleName",
    "email",
    "phone",
    "position",
    "department",
    "employmentType",
    "hireDate",
    "basicSalary",
    "allowance",
    "salaryType",
    "regularHolidayRate",
    "specialHolidayRate",
    "nightDiffPercent",
    "overtimeRegularRate",
    "overtimeRestDayRate",
    "regularHolidayOtRate",
    "specialHolidayOtRate",
)

_SAMPLE_ROW = (
    "Juan",
    "Dela Cruz",
    "M",
    "juan.delacruz@example.com",
    "09171234567",
    "Software Engineer",
    "IT Department",
    "probationary",
    "2025-01-15",
    "50000",
    "5000",
    "monthly",
    "100",
    "30",
    "10",
    "125",
    "169",
    "200",
    "169",
)


@dataclass(frozen=True)
class ParsedEmployeeRow:
    row_index: int  # 1-based, header is row 1
    values: dict[str, str]
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ParsedEmployeeCsv:
    valid_rows: list[ParsedEmployeeRow]
    invalid_rows: list[ParsedEmployeeRow]


def escape_csv_cell(value) -> str:
    s = "" if value is None else str(value).strip()
    if "," in s or '"' in s or "\n" in s:
        return '"' + s.replace('"', '""') + '"'
    return s


def _join(cells: Iterable) -> str:
    return ",".join(escape_csv_cell(c) for c in cells)


def get_employee_csv_template() -> str:
    return "\n".join([",".join(EMPLOYEE_CSV_HEADERS), _join(_SAMPLE_ROW)])


def _records(text: str) -> list[list[str]]:
    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    return [[cell.strip() for cell in row] for row in reader if any(cell.strip() for cell in row)]


def parse_employee_csv_rows(text: str) -> list[ParsedEmployeeRow]:
    """Parse and validate every data row; needs a header plus one row."""
    records = _records(text or "")
    if len(records) < 2:
        return []

    rows: list[ParsedEmployeeRow] = []
    for i, cells in enumerate(records[1:]):
        values = {h: (cells[idx] if idx < len(cells) else "") for idx, h in enumerate(EMPLOYEE_CSV_HEADERS)}
        values["employmentType"] = values["employmentType"] or "probationary"
        values["salaryType"] = values["salaryType"] or "monthly"
        rows.append(ParsedEmployeeRow(row_index=i + 2, values=values, errors=validate_employee_form(values)))
    return rows


def parse_employee_csv(text: str) -> ParsedEmployeeCsv:
    rows = parse_employee_csv_rows(text)
    return ParsedEmployeeCsv(
        valid_rows=[r for r in rows if r.is_valid],
        invalid_rows=[r for r in rows if not r.is_valid],
    )


def _num(value: Optional[float]) -> str:
    if value is None:
        return ""
    value = round(float(value), 6)
    return str(int(value)) if value == int(value) else str(value)


def _percent(value: Optional[float]) -> str:
    return "" if value is None else _num(value * 100)


def export_employees_csv(employees: Iterable[Employee]) -> str:
    lines = [",".join(EMPLOYEE_CSV_HEADERS)]
    for e in employees:
        c = e.compensation
        rates = [_percent(getattr(c, attr)) for attr in RATE_COLUMNS.values()]
        lines.append(
            _join(
                [
                    e.first_name,
                    e.last_name,
                    e.middle_name or "",
                    e.email,
                    e.phone or "",
                    e.position,
                    e.department,
                    e.employment_type.value,
                    e.hire_date.isoformat(),
                    _num(c.basic_salary),
                    _num(c.allowance),
                    c.salary_type.value,
                    *rates,
                ]
            )
        )
    return "\n".join(lines)
