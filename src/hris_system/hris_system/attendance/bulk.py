"""Draft for entering attendance for many days at once.

The draft lives for one bulk-entry session: pick a range, drop or restore
individual days, fill in punches, then ``build_entries`` turns it into one
AttendanceEntry per remaining day (or rejects the whole batch).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import iter_dates, weekday_name
from ..common.time_utils import is_blank
from ..core.enums import AttendanceStatus
from ..core.exceptions import BusinessRuleViolation, ValidationError
from ..employees.model import Employee
from .model import AttendanceEntry


@dataclass(frozen=True)
class DayEntry:
    time_in: str = ""
    time_out: str = ""
    status: str = AttendanceStatus.PRESENT.value
    overtime: str = ""
    remarks: str = ""


class BulkAttendanceDraft:
    def __init__(
        self,
        employee: Employee,
        *,
        start_date: date,
        end_date: date,
        include_saturday: bool = False,
        include_sunday: bool = False,
    ):
        self._employee = employee
        self._excluded: set[date] = set()
        self._entries: dict[date, DayEntry] = {}
        self._start = start_date
        self._end = end_date
        self._include_saturday = include_saturday
        self._include_sunday = include_sunday
        self.set_range(start_date=start_date, end_date=end_date)

    @property
    def employee(self) -> Employee:
        return self._employee

    def set_range(
        self,
        *,
        start_date: date,
        end_date: date,
        include_saturday: Optional[bool] = None,
        include_sunday: Optional[bool] = None,
    ) -> None:
        """Change the range or weekend flags; exclusions outside the new range are forgotten."""
        self._start = start_date
        self._end = end_date
        if include_saturday is not None:
            self._include_saturday = include_saturday
        if include_sunday is not None:
            self._include_sunday = include_sunday

        candidates = set(self._candidate_dates())
        self._excluded &= candidates
        for day in candidates:
            self._entries.setdefault(day, DayEntry())

    def _candidate_dates(self) -> list[date]:
        if self._start > self._end:
            return []
        schedule = self._employee.schedule
        dates = []
        for day in iter_dates(self._start, self._end):
            name = weekday_name(day)
            if (
                not schedule.is_rest_day(day)
                or (name == "saturday" and self._include_saturday)
                or (name == "sunday" and self._include_sunday)
            ):
                dates.append(day)
        return dates

    def get_bulk_dates(self) -> list[date]:
        return [d for d in self._candidate_dates() if d not in self._excluded]

    def get_excluded_dates(self) -> list[date]:
        return sorted(self._excluded)

    def exclude(self, day: date) -> bool:
        if day not in self._candidate_dates():
            return False
        self._excluded.add(day)
        return True

    def restore(self, day: date) -> bool:
        if day not in self._excluded:
            return False
        self._excluded.discard(day)
        return True

    def day_entry(self, day: date) -> DayEntry:
        return self._entries.get(day, DayEntry())

    def set_day(
        self,
        day: date,
        *,
        time_in: Optional[str] = None,
        time_out: Optional[str] = None,
        status: Optional[str] = None,
        overtime: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> DayEntry:
        changes = {
            k: v
            for k, v in {
                "time_in": time_in,
                "time_out": time_out,
                "status": status,
                "overtime": overtime,
                "remarks": remarks,
            }.items()
            if v is not None
        }
        entry = replace(self.day_entry(day), **changes)
        self._entries[day] = entry
        return entry

    def apply_to_all(self, **values: str) -> None:
        """Copy the same punches/status onto every included day."""
        for day in self.get_bulk_dates():
            self.set_day(day, **values)

    def build_entries(self) -> list[AttendanceEntry]:
        """Validate every included day and return the entries to save.

        Raises before anything is saved: BusinessRuleViolation for an empty or
        reversed range, ValidationError naming the first bad date.
        """
        if self._start > self._end:
            raise BusinessRuleViolation("Start date must be before or equal to end date")
        dates = self.get_bulk_dates()
        if not dates:
            raise BusinessRuleViolation("No workdays found in the selected date range")

        entries: list[AttendanceEntry] = []
        for day in dates:
            entries.append(self._to_entry(day, self.day_entry(day)))
        return entries

    def _to_entry(self, day: date, raw: DayEntry) -> AttendanceEntry:
        label = day.isoformat()
        if is_blank(raw.status):
            raise ValidationError(f"Please provide status for {label}", field="status", context=label)
        try:
            status = AttendanceStatus(raw.status.strip())
        except ValueError:
            raise ValidationError(f"Invalid status for {label}", field="status", context=label) from None

        if status == AttendanceStatus.PRESENT and is_blank(raw.time_in) and is_blank(raw.time_out):
            raise ValidationError(
                f"Please provide at least time in or time out for {label} when status is present",
                field="time_in",
                context=label,
            )

        overtime: Optional[float] = None
        if not is_blank(raw.overtime):
            try:
                overtime = float(raw.overtime)
            except ValueError:
                raise ValidationError(
                    f"Overtime for {label} must be a valid number", field="overtime", context=label
                ) from None
            if overtime < 0:
                raise ValidationError(f"Overtime for {label} cannot be negative", field="overtime", context=label)

        time_in: Optional[str] = raw.time_in or None
        time_out: Optional[str] = raw.time_out or None
        if status.clears_punches:
            time_in = time_out = None
            overtime = None

        day_schedule = self._employee.schedule.for_date(day)
        return AttendanceEntry(
            organization_id=self._employee.organization_id,
            employee_id=self._employee.employee_id,
            work_date=day,
            schedule_in=day_schedule.time_in,
            schedule_out=day_schedule.time_out,
            status=status,
            actual_in=time_in,
            actual_out=time_out,
            overtime=overtime,
            remarks=raw.remarks or None,
        )
