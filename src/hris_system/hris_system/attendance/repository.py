from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord, ResolvedAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], ordered by date then employee."""

        raise NotImplementedError

    def create(self, entry: AttendanceEntry, resolved: ResolvedAttendance) -> int:
        raise NotImplementedError

    def update(self, attendance_id: int, entry: AttendanceEntry, resolved: ResolvedAttendance) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
