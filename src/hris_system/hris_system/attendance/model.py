from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, HolidayType


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one day.

    ``late`` is in minutes, ``undertime``/``overtime`` in hours. None means the
    value was never derived (older imported rows); the resolver always fills
    late and undertime.
    """

    attendance_id: int
    organization_id: int
    employee_id: int
    work_date: date
    schedule_in: str
    schedule_out: str
    status: AttendanceStatus
    actual_in: Optional[str] = None
    actual_out: Optional[str] = None
    late: Optional[int] = None
    undertime: Optional[float] = None
    overtime: Optional[float] = None
    is_holiday: Optional[bool] = None
    holiday_type: Optional[HolidayType] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """Input for creating a record (or the merged state during an update)."""

    organization_id: int
    employee_id: int
    work_date: date
    schedule_in: str
    schedule_out: str
    status: AttendanceStatus
    actual_in: Optional[str] = None
    actual_out: Optional[str] = None
    overtime: Optional[float] = None
    is_holiday: Optional[bool] = None
    holiday_type: Optional[HolidayType] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class ResolvedAttendance:
    """Derived fields the resolver writes back onto a record."""

    actual_in: Optional[str]
    actual_out: Optional[str]
    late: int
    undertime: float
    overtime: Optional[float]
