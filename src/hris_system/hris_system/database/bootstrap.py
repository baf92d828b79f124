from __future__ import annotations

import logging
from datetime import date

logger = logging.getLogger(__name__)

_DEMO_EMPLOYEES = (
    {
        "firstName": "Maria",
        "lastName": "Santos",
        "email": "maria.santos@example.com",
        "position": "HR Officer",
        "department": "HR",
        "employmentType": "regular",
        "hireDate": "2023-02-01",
        "basicSalary": "30000",
        "allowance": "2000",
        "salaryType": "monthly",
    },
    {
        "firstName": "Jose",
        "lastName": "Reyes",
        "email": "jose.reyes@example.com",
        "position": "Warehouse Staff",
        "department": "Operations",
        "employmentType": "probationary",
        "hireDate": "2024-06-15",
        "basicSalary": "650",
        "salaryType": "daily",
    },
)


def seed_demo_data(container, *, organization_id: int, year: int | None = None) -> None:
    """Load a small demo organisation: departments, national holidays, two employees.

    Safe to call more than once; employees are only added to an empty organisation.
    """
    year = year or date.today().year
    settings = container.settings_service.update_departments(organization_id, ["HR", "Operations"])
    container.holiday_service.initialize_philippine_holidays(organization_id, year)

    if container.employee_service.get_employees(organization_id):
        return
    for values in _DEMO_EMPLOYEES:
        container.employee_service.create_employee(
            organization_id=organization_id,
            values=values,
            payroll_settings=settings.payroll_settings,
        )
    logger.info("[bootstrap] org=%s demo data ready (%s employees)", organization_id, len(_DEMO_EMPLOYEES))
