from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..database.memory import MemoryDatabase
from .model import AttendanceEntry, AttendanceRecord, ResolvedAttendance
from .repository import AttendanceRepository

_TABLE = "attendance_records"


class MemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, db: MemoryDatabase):
        self._db = db

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._db.table(_TABLE).get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._db.table(_TABLE).values():
            if r.employee_id == int(employee_id) and r.work_date == work_date:
                return r
        return None

    def list_range(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        rows = [
            r
            for r in self._db.table(_TABLE).values()
            if r.organization_id == int(organization_id)
            and start_date <= r.work_date <= end_date
            and (employee_id is None or r.employee_id == int(employee_id))
        ]
        rows.sort(key=lambda r: (r.work_date, r.employee_id))
        return rows

    def create(self, entry: AttendanceEntry, resolved: ResolvedAttendance) -> int:
        with self._db.transaction() as db:
            attendance_id = db.next_id(_TABLE)
            now = datetime.now()
            db.table(_TABLE)[attendance_id] = AttendanceRecord(
                attendance_id=attendance_id,
                organization_id=entry.organization_id,
                employee_id=entry.employee_id,
                work_date=entry.work_date,
                schedule_in=entry.schedule_in,
                schedule_out=entry.schedule_out,
                status=entry.status,
                actual_in=resolved.actual_in,
                actual_out=resolved.actual_out,
                late=resolved.late,
                undertime=resolved.undertime,
                overtime=resolved.overtime,
                is_holiday=entry.is_holiday,
                holiday_type=entry.holiday_type,
                remarks=entry.remarks,
                created_at=now,
                updated_at=now,
            )
            return attendance_id

    def update(self, attendance_id: int, entry: AttendanceEntry, resolved: ResolvedAttendance) -> bool:
        with self._db.transaction() as db:
            current = db.table(_TABLE).get(int(attendance_id))
            if current is None:
                return False
            db.table(_TABLE)[current.attendance_id] = replace(
                current,
                work_date=entry.work_date,
                schedule_in=entry.schedule_in,
                schedule_out=entry.schedule_out,
                status=entry.status,
                actual_in=resolved.actual_in,
                actual_out=resolved.actual_out,
                late=resolved.late,
                undertime=resolved.undertime,
                overtime=resolved.overtime,
                is_holiday=entry.is_holiday,
                holiday_type=entry.holiday_type,
                remarks=entry.remarks,
                updated_at=datetime.now(),
            )
            return True

    def delete(self, attendance_id: int) -> bool:
        with self._db.transaction() as db:
            return db.table(_TABLE).pop(int(attendance_id), None) is not None
