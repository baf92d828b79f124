from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PayrollRun, PayrollRunSpec, Payslip


class PayrollRepository(Protocol):
    def get_run(self, run_id: int) -> Optional[PayrollRun]:
        raise NotImplementedError

    def list_runs(self, organization_id: int) -> Sequence[PayrollRun]:
        raise NotImplementedError

    def create_run(self, spec: PayrollRunSpec, *, period: str) -> int:
        raise NotImplementedError

    def save_run(self, run: PayrollRun) -> None:
        raise NotImplementedError

    def delete_run(self, run_id: int) -> bool:
        raise NotImplementedError

    def get_payslip(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_payslips(self, run_id: int) -> Sequence[Payslip]:
        raise NotImplementedError

    def list_payslips_for_employee(self, employee_id: int, *, since: date) -> Sequence[Payslip]:
        """Payslips whose period starts on or after ``since``."""
        raise NotImplementedError

    def create_payslip(self, payslip: Payslip) -> int:
        """Store ``payslip`` (its id is ignored) and return the new id."""
        raise NotImplementedError

    def save_payslip(self, payslip: Payslip) -> None:
        raise NotImplementedError

    def delete_payslips(self, run_id: int) -> int:
        raise NotImplementedError
