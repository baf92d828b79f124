from __future__ import annotations

from ..core.enums import PayrollRunStatus
from ..core.exceptions import BusinessRuleViolation

_S = PayrollRunStatus

ALLOWED_TRANSITIONS: dict[PayrollRunStatus, frozenset[PayrollRunStatus]] = {
    _S.DRAFT: frozenset({_S.FINALIZED, _S.CANCELLED}),
    _S.FINALIZED: frozenset({_S.PAID, _S.DRAFT, _S.CANCELLED}),
    _S.PAID: frozenset({_S.ARCHIVED}),
    _S.ARCHIVED: frozenset(),
    _S.CANCELLED: frozenset(),
}


def can_transition(current: PayrollRunStatus, target: PayrollRunStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: PayrollRunStatus, target: PayrollRunStatus) -> None:
    if not can_transition(current, target):
        raise BusinessRuleViolation(f"Cannot change payroll run from {current.value} to {target.value}")
