from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_attendance_repository import MemoryAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import MAX_REPORTED_ERRORS
from .database.memory import MemoryDatabase
from .employees.memory_employee_repository import MemoryEmployeeRepository
from .employees.service import EmployeeService
from .holidays.memory_holiday_repository import MemoryHolidayRepository
from .holidays.service import HolidayService
from .payroll.memory_payroll_repository import MemoryPayrollRepository
from .payroll.report_service import PayrollReportService
from .payroll.service import PayrollService
from .settings.memory_settings_repository import MemorySettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    db: MemoryDatabase

    employees_repo: MemoryEmployeeRepository
    attendance_repo: MemoryAttendanceRepository
    holidays_repo: MemoryHolidayRepository
    settings_repo: MemorySettingsRepository
    payroll_repo: MemoryPayrollRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    holiday_service: HolidayService
    settings_service: SettingsService
    payroll_service: PayrollService
    payroll_report_service: PayrollReportService

    default_organization_id: int = 1


def build_container(
    *,
    db: Optional[MemoryDatabase] = None,
    default_organization_id: int = 1,
    max_reported_errors: int = MAX_REPORTED_ERRORS,
) -> Container:
    db = db or MemoryDatabase.get_instance()

    employees_repo = MemoryEmployeeRepository(db)
    attendance_repo = MemoryAttendanceRepository(db)
    holidays_repo = MemoryHolidayRepository(db)
    settings_repo = MemorySettingsRepository(db)
    payroll_repo = MemoryPayrollRepository(db)

    employee_service = EmployeeService(employees_repo, max_reported_errors=max_reported_errors)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        strategy_factory=AttendanceStrategyFactory(),
        max_reported_errors=max_reported_errors,
    )
    holiday_service = HolidayService(holidays_repo)
    settings_service = SettingsService(settings_repo)
    payroll_service = PayrollService(
        payroll_repo,
        attendance_repo,
        employees_repo,
        settings_service,
        holiday_service,
    )
    payroll_report_service = PayrollReportService(attendance_repo, employees_repo)

    return Container(
        db=db,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        settings_repo=settings_repo,
        payroll_repo=payroll_repo,
        employee_service=employee_service,
        attendance_service=attendance_service,
        holiday_service=holiday_service,
        settings_service=settings_service,
        payroll_service=payroll_service,
        payroll_report_service=payroll_report_service,
        default_organization_id=default_organization_id,
    )
