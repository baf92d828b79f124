from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmploymentStatus
from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_organization(
        self,
        organization_id: int,
        *,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee: NewEmployee) -> int:
        """Persist a new employee. Assigns an employee code when none is given.

        Returns employee_id.
        """

        raise NotImplementedError

    def save(self, employee: Employee) -> None:
        raise NotImplementedError
