from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Organisation roles used for permission checks."""

    OWNER = "owner"
    ADMIN = "admin"
    HR = "hr"
    ACCOUNTING = "accounting"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status stored on each record."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    HALF_DAY = "half-day"

    @property
    def clears_punches(self) -> bool:
        return self in (AttendanceStatus.ABSENT, AttendanceStatus.LEAVE)


class HolidayType(str, Enum):
    REGULAR = "regular"
    SPECIAL = "special"
    SPECIAL_WORKING = "special_working"


class SalaryType(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


class EmploymentType(str, Enum):
    PROBATIONARY = "probationary"
    REGULAR = "regular"
    CONTRACTUAL = "contractual"
    PART_TIME = "part-time"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    RESIGNED = "resigned"
    TERMINATED = "terminated"


class PayrollRunStatus(str, Enum):
    """Payroll run lifecycle states."""

    DRAFT = "draft"
    FINALIZED = "finalized"
    PAID = "paid"
    ARCHIVED = "archived"
    CANCELLED = "cancelled"


class DeductionFrequency(str, Enum):
    """How much of a monthly government contribution lands in one cutoff."""

    FULL = "full"
    HALF = "half"


class RecurringFrequency(str, Enum):
    MONTHLY = "monthly"
    PER_CUTOFF = "per-cutoff"


class LineItemType(str, Enum):
    GOVERNMENT = "government"
    ATTENDANCE = "attendance"
    LOAN = "loan"
    OTHER = "other"
    INCENTIVE = "incentive"
