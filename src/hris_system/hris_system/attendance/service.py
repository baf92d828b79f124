from __future__ import annotations

import logging
from dataclasses import asdict, replace
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..common.batch import BatchResult
from ..common.time_utils import (
    calculate_late,
    calculate_overtime,
    calculate_undertime,
    format_time_12_hour,
    is_blank,
    time_to_minutes,
)
from ..common.validators import require_non_negative
from ..core.constants import MAX_REPORTED_ERRORS
from ..core.enums import AttendanceStatus, HolidayType
from ..core.exceptions import BusinessRuleViolation, DomainError, NotFoundError, PartialBatchFailure, ValidationError
from ..employees.repository import EmployeeRepository
from .bulk import BulkAttendanceDraft
from .csv_import import AttendanceCsvRow, parse_attendance_csv
from .factory import AttendanceStrategyFactory
from .model import AttendanceEntry, AttendanceRecord
from .overrides import KEEP, RECALCULATE, Override
from .repository import AttendanceRepository
from .resolver import resolve_attendance

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "schedule_in",
    "schedule_out",
    "actual_in",
    "actual_out",
    "overtime",
    "is_holiday",
    "holiday_type",
    "remarks",
    "status",
)


def _validate_entry(entry: AttendanceEntry) -> AttendanceEntry:
    """Check clock strings and overtime; normalise blank punches to None.

    Absent and leave entries drop whatever punches and overtime they carry.
    """
    context = entry.work_date.isoformat()
    try:
        status = AttendanceStatus(entry.status)
        holiday_type = HolidayType(entry.holiday_type) if entry.holiday_type else None
    except ValueError as ex:
        raise ValidationError(str(ex), context=context) from None
    if status.clears_punches:
        entry = replace(entry, actual_in=None, actual_out=None, overtime=None)

    for name in ("schedule_in", "schedule_out"):
        if is_blank(getattr(entry, name)):
            raise ValidationError(f"{name} is required", field=name, context=context)
    for name in ("schedule_in", "schedule_out", "actual_in", "actual_out"):
        value = getattr(entry, name)
        if not is_blank(value):
            try:
                time_to_minutes(value)
            except ValidationError as ex:
                raise ValidationError(ex.message, field=name, context=context) from None
    if entry.overtime is not None:
        require_non_negative(float(entry.overtime), "overtime", label="Overtime")

    return replace(
        entry,
        actual_in=None if is_blank(entry.actual_in) else entry.actual_in.strip(),
        actual_out=None if is_blank(entry.actual_out) else entry.actual_out.strip(),
        status=status,
        holiday_type=holiday_type,
    )


def _entry_from_record(record: AttendanceRecord) -> AttendanceEntry:
    return AttendanceEntry(
        organization_id=record.organization_id,
        employee_id=record.employee_id,
        work_date=record.work_date,
        schedule_in=record.schedule_in,
        schedule_out=record.schedule_out,
        status=record.status,
        actual_in=record.actual_in,
        actual_out=record.actual_out,
        overtime=record.overtime,
        is_holiday=record.is_holiday,
        holiday_type=record.holiday_type,
        remarks=record.remarks,
    )


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        max_reported_errors: int = MAX_REPORTED_ERRORS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._max_errors = max_reported_errors

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance not found")
        return record

    def create_attendance(
        self,
        entry: AttendanceEntry,
        *,
        late: Override = KEEP,
        undertime: Override = KEEP,
    ) -> int:
        self._require_employee(entry.employee_id)
        entry = _validate_entry(entry)

        if self._attendance.get_for_employee_and_date(entry.employee_id, entry.work_date):
            raise BusinessRuleViolation("Attendance already exists for this date")

        resolved = resolve_attendance(entry, late=late, undertime=undertime, factory=self._factory)
        return self._attendance.create(entry, resolved)

    def update_attendance(
        self,
        attendance_id: int,
        changes: Mapping[str, Any],
        *,
        late: Override = KEEP,
        undertime: Override = KEEP,
    ) -> AttendanceRecord:
        """Apply a partial edit, then re-derive.

        Fields missing from ``changes`` keep their stored value. ``late`` and
        ``undertime`` follow the Keep / Recalculate / SetTo contract.
        """
        current = self.get_record(attendance_id)
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown attendance field(s): {', '.join(sorted(unknown))}")

        merged = _validate_entry(replace(_entry_from_record(current), **dict(changes)))
        resolved = resolve_attendance(merged, late=late, undertime=undertime, current=current, factory=self._factory)
        self._attendance.update(current.attendance_id, merged, resolved)
        return self.get_record(current.attendance_id)

    def upsert_attendance(self, entry: AttendanceEntry) -> tuple[int, str]:
        """Create, or replace the record already on that date. Returns (id, action)."""
        self._require_employee(entry.employee_id)
        entry = _validate_entry(entry)
        existing = self._attendance.get_for_employee_and_date(entry.employee_id, entry.work_date)
        resolved = resolve_attendance(entry, late=RECALCULATE, undertime=RECALCULATE, factory=self._factory)
        if existing:
            self._attendance.update(existing.attendance_id, entry, resolved)
            return existing.attendance_id, "updated"
        return self._attendance.create(entry, resolved), "created"

    def bulk_create_attendance(self, entries: Iterable[AttendanceEntry]) -> BatchResult:
        """Upsert each entry in order; failures are collected, not rolled back."""
        result = BatchResult(max_errors=self._max_errors)
        for entry in entries:
            try:
                attendance_id, action = self.upsert_attendance(entry)
                result.record_success({"id": attendance_id, "action": action, "date": entry.work_date.isoformat()})
            except DomainError as ex:
                result.record_failure(f"{entry.work_date.isoformat()}: {ex}")

        if result.failed and not result.added:
            raise PartialBatchFailure(result)
        if result.failed:
            logger.warning("[attendance] bulk create: saved=%s failed=%s", result.added, result.failed)
        return result

    def start_bulk_draft(
        self,
        employee_id: int,
        *,
        start_date: date,
        end_date: date,
        include_saturday: bool = False,
        include_sunday: bool = False,
    ) -> BulkAttendanceDraft:
        return BulkAttendanceDraft(
            self._require_employee(employee_id),
            start_date=start_date,
            end_date=end_date,
            include_saturday=include_saturday,
            include_sunday=include_sunday,
        )

    def submit_bulk_draft(self, draft: BulkAttendanceDraft) -> BatchResult:
        # build_entries validates every day before the first write
        return self.bulk_create_attendance(draft.build_entries())

    def import_csv(
        self,
        *,
        organization_id: int,
        text: str,
        include_saturday: bool = True,
        include_sunday: bool = True,
    ) -> tuple[list[AttendanceCsvRow], BatchResult]:
        employees = self._employees.list_for_organization(int(organization_id))
        rows = parse_attendance_csv(
            text, employees, include_saturday=include_saturday, include_sunday=include_sunday
        )
        importable = [r.entry for r in rows if r.entry is not None and r.included]
        if not importable:
            return rows, BatchResult(max_errors=self._max_errors)
        return rows, self.bulk_create_attendance(importable)

    def delete_attendance(self, attendance_id: int) -> None:
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")

    def get_attendance(
        self,
        *,
        organization_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> list[AttendanceRecord]:
        if start > end:
            raise BusinessRuleViolation("Start date must be before or equal to end date")
        return list(
            self._attendance.list_range(
                organization_id=int(organization_id), start_date=start, end_date=end, employee_id=employee_id
            )
        )

    def get_listing(
        self,
        *,
        organization_id: int,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> list[dict]:
        rows = self.get_attendance(organization_id=organization_id, start=start, end=end, employee_id=employee_id)
        return [self._to_ui(r) for r in rows]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        present = r.status == AttendanceStatus.PRESENT
        if r.undertime is not None:
            undertime = r.undertime
        else:
            undertime = calculate_undertime(r.schedule_out, r.actual_out) if present else 0.0
        if r.late is not None:
            late = r.late
        else:
            late = calculate_late(r.schedule_in, r.actual_in, undertime) if present else 0

        row = {k: v for k, v in asdict(r).items() if k not in ("created_at", "updated_at")}
        row.update(
            {
                "work_date": r.work_date.isoformat(),
                "status": r.status.value,
                "holiday_type": r.holiday_type.value if r.holiday_type else None,
                "late": late,
                "undertime": undertime,
                "schedule_display": f"{format_time_12_hour(r.schedule_in)} - {format_time_12_hour(r.schedule_out)}",
                "actual_in_display": format_time_12_hour(r.actual_in) or "-",
                "actual_out_display": format_time_12_hour(r.actual_out) or "-",
                "overtime_display": calculate_overtime(r.schedule_out, r.actual_out) if present else 0.0,
            }
        )
        return row
