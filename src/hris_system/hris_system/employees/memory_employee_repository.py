from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmploymentStatus
from ..database.memory import MemoryDatabase
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_TABLE = "employees"


class MemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, db: MemoryDatabase):
        self._db = db

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._db.table(_TABLE).get(int(employee_id))

    def list_for_organization(
        self,
        organization_id: int,
        *,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
    ) -> Sequence[Employee]:
        rows = [
            e
            for e in self._db.table(_TABLE).values()
            if e.organization_id == int(organization_id)
            and (department is None or e.department == department)
            and (status is None or e.status == status)
        ]
        rows.sort(key=lambda e: (e.last_name.lower(), e.first_name.lower()))
        return rows

    def create(self, employee: NewEmployee) -> int:
        with self._db.transaction() as db:
            employee_id = db.next_id(_TABLE)
            db.table(_TABLE)[employee_id] = Employee(
                employee_id=employee_id,
                organization_id=employee.organization_id,
                employee_code=employee.employee_code or f"EMP-{employee_id:04d}",
                first_name=employee.first_name,
                last_name=employee.last_name,
                email=employee.email,
                position=employee.position,
                department=employee.department,
                employment_type=employee.employment_type,
                hire_date=employee.hire_date,
                compensation=employee.compensation,
                schedule=employee.schedule,
                middle_name=employee.middle_name,
                phone=employee.phone,
                recurring_deductions=employee.recurring_deductions,
            )
            return employee_id

    def save(self, employee: Employee) -> None:
        with self._db.transaction() as db:
            db.table(_TABLE)[employee.employee_id] = employee
