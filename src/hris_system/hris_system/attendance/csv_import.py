from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import parse_flexible_date, weekday_name
from ..common.time_utils import normalize_clock_time
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from .model import AttendanceEntry

ATTENDANCE_CSV_HEADERS = ("Employee", "Date", "Time In", "Time Out", "Status", "Notes")

_EMPLOYEE_ALIASES = ("employee", "employee name", "name", "employee id", "staff", "full name")
_DATE_ALIASES = ("date", "work date", "attendance date", "day")
_TIME_IN_ALIASES = ("time in", "timein", "in", "clock in", "check in")
_TIME_OUT_ALIASES = ("time out", "timeout", "out", "clock out", "check out")
_STATUS_ALIASES = ("status", "attendance status")
_NOTES_ALIASES = ("notes", "remarks", "comment", "comments")

_STATUS_MAP = {
    "present": AttendanceStatus.PRESENT,
    "absent": AttendanceStatus.ABSENT,
    "leave": AttendanceStatus.LEAVE,
    "half-day": AttendanceStatus.HALF_DAY,
    "halfday": AttendanceStatus.HALF_DAY,
}


@dataclass(frozen=True)
class AttendanceCsvRow:
    row_index: int
    employee_key: str
    entry: Optional[AttendanceEntry]
    error: Optional[str] = None
    included: bool = True


def _column(headers: Sequence[str], aliases: Sequence[str]) -> Optional[str]:
    lowered = {h.lower().strip(): h for h in headers}
    for alias in aliases:
        if alias in lowered:
            return lowered[alias]
    return None


def _normalize(value: str) -> str:
    return " ".join(value.lower().split())


def _find_employee(employees: Sequence[Employee], key: str) -> Optional[Employee]:
    key_norm = _normalize(key)
    if not key_norm:
        return None
    for e in employees:
        if _normalize(e.full_name) == key_norm or (e.employee_code and e.employee_code.lower() == key_norm):
            return e
    return None


def parse_attendance_csv(
    text: str,
    employees: Sequence[Employee],
    *,
    include_saturday: bool = True,
    include_sunday: bool = True,
) -> list[AttendanceCsvRow]:
    """Turn an attendance sheet into entries, one row per line.

    Rows that cannot be imported carry an ``error``; weekend rows are kept but
    marked ``included=False`` when the matching flag is off. A later row for
    the same employee and date replaces an earlier one.
    """
    reader = csv.DictReader(io.StringIO(text or ""))
    headers = reader.fieldnames or []
    employee_col = _column(headers, _EMPLOYEE_ALIASES)
    date_col = _column(headers, _DATE_ALIASES)
    if not employee_col or not date_col:
        raise ValidationError(
            "CSV must include a name column (e.g. Employee, Name) and a date column (e.g. Date, Work Date).",
            field="csv",
        )
    time_in_col = _column(headers, _TIME_IN_ALIASES)
    time_out_col = _column(headers, _TIME_OUT_ALIASES)
    status_col = _column(headers, _STATUS_ALIASES)
    notes_col = _column(headers, _NOTES_ALIASES)

    def cell(row: dict, col: Optional[str]) -> str:
        return (row.get(col) or "").strip() if col else ""

    rows: list[AttendanceCsvRow] = []
    seen: dict[tuple[int, object], int] = {}
    for i, raw in enumerate(reader):
        if not any((v or "").strip() for v in raw.values() if isinstance(v, str)):
            continue
        row_index = i + 2
        key = cell(raw, employee_col)
        date_str = cell(raw, date_col)
        status = _STATUS_MAP.get(cell(raw, status_col).lower() or "present", AttendanceStatus.PRESENT)
        actual_in = normalize_clock_time(cell(raw, time_in_col))
        actual_out = normalize_clock_time(cell(raw, time_out_col))
        employee = _find_employee(employees, key)
        work_date = parse_flexible_date(date_str)

        error = None
        if not employee:
            error = "Employee not found"
        elif work_date is None:
            error = "Invalid date"
        elif status == AttendanceStatus.PRESENT and not actual_in and not actual_out:
            error = "Time In/Out required for present"

        if error:
            rows.append(AttendanceCsvRow(row_index=row_index, employee_key=key or "-", entry=None, error=error))
            continue

        day_name = weekday_name(work_date)
        day_schedule = employee.schedule.for_date(work_date)
        schedule_in, schedule_out = ("09:00", "18:00")
        if day_schedule.is_workday:
            schedule_in, schedule_out = day_schedule.time_in, day_schedule.time_out
        if status.clears_punches:
            actual_in = actual_out = None

        included = not (
            (day_name == "saturday" and not include_saturday) or (day_name == "sunday" and not include_sunday)
        )
        parsed = AttendanceCsvRow(
            row_index=row_index,
            employee_key=key,
            entry=AttendanceEntry(
                organization_id=employee.organization_id,
                employee_id=employee.employee_id,
                work_date=work_date,
                schedule_in=schedule_in,
                schedule_out=schedule_out,
                status=status,
                actual_in=actual_in,
                actual_out=actual_out,
                remarks=cell(raw, notes_col) or None,
            ),
            included=included,
        )
        dedupe_key = (employee.employee_id, work_date)
        if dedupe_key in seen:
            rows[seen[dedupe_key]] = parsed
        else:
            seen[dedupe_key] = len(rows)
            rows.append(parsed)
    return rows
