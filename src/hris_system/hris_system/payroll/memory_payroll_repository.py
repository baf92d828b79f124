from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..database.memory import MemoryDatabase
from .model import PayrollRun, PayrollRunSpec, Payslip
from .repository import PayrollRepository

_RUNS = "payroll_runs"
_PAYSLIPS = "payslips"


class MemoryPayrollRepository(PayrollRepository):
    def __init__(self, db: MemoryDatabase):
        self._db = db

    def get_run(self, run_id: int) -> Optional[PayrollRun]:
        return self._db.table(_RUNS).get(int(run_id))

    def list_runs(self, organization_id: int) -> Sequence[PayrollRun]:
        return [r for r in self._db.table(_RUNS).values() if r.organization_id == int(organization_id)]

    def create_run(self, spec: PayrollRunSpec, *, period: str) -> int:
        with self._db.transaction() as db:
            run_id = db.next_id(_RUNS)
            now = datetime.now()
            db.table(_RUNS)[run_id] = PayrollRun(
                run_id=run_id,
                spec=spec,
                period=period,
                processed_by=spec.processed_by,
                created_at=now,
                updated_at=now,
            )
            return run_id

    def save_run(self, run: PayrollRun) -> None:
        with self._db.transaction() as db:
            db.table(_RUNS)[run.run_id] = run

    def delete_run(self, run_id: int) -> bool:
        with self._db.transaction() as db:
            return db.table(_RUNS).pop(int(run_id), None) is not None

    def get_payslip(self, payslip_id: int) -> Optional[Payslip]:
        return self._db.table(_PAYSLIPS).get(int(payslip_id))

    def list_payslips(self, run_id: int) -> Sequence[Payslip]:
        rows = [p for p in self._db.table(_PAYSLIPS).values() if p.payroll_run_id == int(run_id)]
        rows.sort(key=lambda p: p.payslip_id)
        return rows

    def list_payslips_for_employee(self, employee_id: int, *, since: date) -> Sequence[Payslip]:
        return [
            p
            for p in self._db.table(_PAYSLIPS).values()
            if p.employee_id == int(employee_id) and p.period_start >= since
        ]

    def create_payslip(self, payslip: Payslip) -> int:
        with self._db.transaction() as db:
            payslip_id = db.next_id(_PAYSLIPS)
            db.table(_PAYSLIPS)[payslip_id] = replace(payslip, payslip_id=payslip_id)
            return payslip_id

    def save_payslip(self, payslip: Payslip) -> None:
        with self._db.transaction() as db:
            db.table(_PAYSLIPS)[payslip.payslip_id] = payslip

    def delete_payslips(self, run_id: int) -> int:
        with self._db.transaction() as db:
            table = db.table(_PAYSLIPS)
            doomed = [pid for pid, p in table.items() if p.payroll_run_id == int(run_id)]
            for pid in doomed:
                del table[pid]
            return len(doomed)
