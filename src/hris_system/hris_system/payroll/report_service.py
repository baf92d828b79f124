from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.time_utils import calculate_late, calculate_undertime
from ..core.enums import AttendanceStatus
from ..core.exceptions import BusinessRuleViolation
from ..employees.repository import EmployeeRepository


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class PayrollReportService:
    """Attendance totals per employee over a date range (the input side of a payroll run)."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def build_attendance_report(
        self,
        *,
        organization_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> ReportData:
        if start > end:
            raise BusinessRuleViolation("Start date must be before or equal to end date")
        records = self._attendance.list_range(
            organization_id=int(organization_id), start_date=start, end_date=end, employee_id=employee_id
        )

        names: dict[int, str] = {}
        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in records:
            if r.employee_id not in names:
                employee = self._employees.get_by_id(r.employee_id)
                names[r.employee_id] = employee.full_name if employee else "-"

            present = r.status == AttendanceStatus.PRESENT
            if r.undertime is not None:
                undertime = float(r.undertime)
            else:
                undertime = calculate_undertime(r.schedule_out, r.actual_out) if present else 0.0
            if r.late is not None:
                late = int(r.late)
            else:
                late = calculate_late(r.schedule_in, r.actual_in, undertime) if present else 0
            overtime = float(r.overtime or 0)

            out_rows.append(
                {
                    "employee_id": r.employee_id,
                    "full_name": names[r.employee_id],
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "status": r.status.value,
                    "actual_in": r.actual_in or "-",
                    "actual_out": r.actual_out or "-",
                    "late_minutes": late,
                    "undertime_hours": undertime,
                    "overtime_hours": overtime,
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "employee_id": r.employee_id,
                    "full_name": names[r.employee_id],
                    "days_present": 0.0,
                    "absences": 0,
                    "late_minutes": 0,
                    "late_count": 0,
                    "undertime_hours": 0.0,
                    "overtime_hours": 0.0,
                }
                summary_map[r.employee_id] = s
            if r.status == AttendanceStatus.PRESENT:
                s["days_present"] += 1
            elif r.status == AttendanceStatus.HALF_DAY:
                s["days_present"] += 0.5
            elif r.status == AttendanceStatus.ABSENT:
                s["absences"] += 1
            s["late_minutes"] += late
            s["late_count"] += 1 if late > 0 else 0
            s["undertime_hours"] += undertime
            s["overtime_hours"] += overtime

        summary = sorted(summary_map.values(), key=lambda x: x["late_minutes"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)
