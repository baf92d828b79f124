from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from ..common.batch import BatchResult
from ..common.datetime_utils import parse_iso_date
from ..core.constants import MAX_REPORTED_ERRORS
from ..core.enums import EmploymentStatus, EmploymentType, SalaryType
from ..core.exceptions import DomainError, NotFoundError, PartialBatchFailure, ValidationError
from ..schedules.model import DEFAULT_BULK_SCHEDULE, WeeklySchedule
from ..settings.model import PayrollSettings
from ..settings.rates import org_rate_defaults
from .csv_utils import ParsedEmployeeCsv, ParsedEmployeeRow, parse_employee_csv
from .model import Compensation, Employee, NewEmployee, RecurringDeduction
from .repository import EmployeeRepository
from .validation import RATE_COLUMNS, validate_employee_form

logger = logging.getLogger(__name__)


def _optional_float(value) -> Optional[float]:
    if value is None or not str(value).strip():
        return None
    return float(str(value).strip())


def build_compensation(
    values: Mapping[str, Optional[str]],
    *,
    rates_are_percent: bool = False,
    payroll_settings: Optional[PayrollSettings] = None,
) -> Compensation:
    """Compensation from validated form/CSV values.

    CSV rates are whole percentages and a blank CSV rate takes the
    organisation's current rate; form rates are already decimals and a blank
    one stays unset so it tracks the organisation setting.
    """
    org_rates = org_rate_defaults(payroll_settings)
    rates: dict[str, Optional[float]] = {}
    for column, name in RATE_COLUMNS.items():
        raw = _optional_float(values.get(column))
        if rates_are_percent:
            rates[name] = raw / 100 if raw is not None else getattr(org_rates, name)
        else:
            rates[name] = raw

    return Compensation(
        basic_salary=float(str(values["basicSalary"]).strip()),
        salary_type=SalaryType(str(values["salaryType"]).strip()),
        allowance=_optional_float(values.get("allowance")),
        **rates,
    )


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, *, max_reported_errors: int = MAX_REPORTED_ERRORS):
        self._employees = employees
        self._max_errors = max_reported_errors

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_employees(
        self,
        organization_id: int,
        *,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
    ) -> list[Employee]:
        return list(self._employees.list_for_organization(int(organization_id), department=department, status=status))

    def create_employee(
        self,
        *,
        organization_id: int,
        values: Mapping[str, Optional[str]],
        schedule: Optional[WeeklySchedule] = None,
        rates_are_percent: bool = False,
        payroll_settings: Optional[PayrollSettings] = None,
        recurring_deductions: Iterable[RecurringDeduction] = (),
    ) -> int:
        errors = validate_employee_form(values)
        if errors:
            field, message = next(iter(errors.items()))
            raise ValidationError(message, field=field)

        def text(key: str) -> Optional[str]:
            raw = values.get(key)
            return str(raw).strip() if raw is not None and str(raw).strip() else None

        new_employee = NewEmployee(
            organization_id=int(organization_id),
            first_name=text("firstName"),
            last_name=text("lastName"),
            middle_name=text("middleName"),
            email=text("email"),
            phone=text("phone"),
            position=text("position"),
            department=text("department"),
            employment_type=EmploymentType(text("employmentType")),
            hire_date=parse_iso_date(text("hireDate")),
            compensation=build_compensation(
                values, rates_are_percent=rates_are_percent, payroll_settings=payroll_settings
            ),
            schedule=schedule or DEFAULT_BULK_SCHEDULE,
            employee_code=text("employeeId"),
            recurring_deductions=tuple(recurring_deductions),
        )
        return self._employees.create(new_employee)

    def handle_bulk_add(
        self,
        *,
        organization_id: int,
        valid_rows: Iterable[ParsedEmployeeRow],
        payroll_settings: Optional[PayrollSettings] = None,
    ) -> BatchResult:
        """Create one employee per validated CSV row, in order.

        A failing row is reported and skipped; rows already added stay added.
        """
        result = BatchResult(max_errors=self._max_errors)
        for row in valid_rows:
            try:
                employee_id = self.create_employee(
                    organization_id=organization_id,
                    values=row.values,
                    schedule=DEFAULT_BULK_SCHEDULE,
                    rates_are_percent=True,
                    payroll_settings=payroll_settings,
                )
                result.record_success({"row": row.row_index, "employee_id": employee_id})
            except DomainError as ex:
                result.record_failure(f"Row {row.row_index}: {ex}")
            except (KeyError, ValueError) as ex:
                logger.warning("[employees] bulk add row %s failed: %s", row.row_index, ex)
                result.record_failure(f"Row {row.row_index}: Failed")

        if result.failed and not result.added:
            raise PartialBatchFailure(result)
        if result.failed:
            logger.warning("[employees] bulk add: added=%s failed=%s", result.added, result.failed)
        return result

    def import_csv(
        self,
        *,
        organization_id: int,
        text: str,
        payroll_settings: Optional[PayrollSettings] = None,
    ) -> tuple[ParsedEmployeeCsv, BatchResult]:
        parsed = parse_employee_csv(text)
        if not parsed.valid_rows:
            return parsed, BatchResult(max_errors=self._max_errors)
        result = self.handle_bulk_add(
            organization_id=organization_id,
            valid_rows=parsed.valid_rows,
            payroll_settings=payroll_settings,
        )
        return parsed, result

    def update_schedule(self, employee_id: int, schedule: WeeklySchedule) -> Employee:
        updated = replace(self.get_employee(employee_id), schedule=schedule)
        self._employees.save(updated)
        return updated

    def set_recurring_deductions(self, employee_id: int, deductions: Iterable[RecurringDeduction]) -> Employee:
        updated = replace(self.get_employee(employee_id), recurring_deductions=tuple(deductions))
        self._employees.save(updated)
        return updated

    def set_status(self, employee_id: int, status: EmploymentStatus) -> Employee:
        updated = replace(self.get_employee(employee_id), status=status)
        self._employees.save(updated)
        return updated
