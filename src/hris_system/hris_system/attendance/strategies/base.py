from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import AttendanceEntry, ResolvedAttendance
from ..overrides import Keep, Override, Recalculate, SetTo


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how a status turns punches into late/undertime."""

    @abstractmethod
    def resolve(
        self,
        entry: AttendanceEntry,
        *,
        late: Override,
        undertime: Override,
        current_late: Optional[int] = None,
        current_undertime: Optional[float] = None,
    ) -> ResolvedAttendance:
        raise NotImplementedError


def apply_override(override: Override, *, current, compute):
    """Pick the final value for one derived field.

    ``compute`` is only called when recomputation is needed. Keep falls back to
    computing when there is no stored value (i.e. on create).
    """
    if isinstance(override, SetTo):
        return override.value
    if isinstance(override, Keep) and current is not None:
        return current
    if isinstance(override, (Keep, Recalculate)):
        return compute()
    raise TypeError(f"Unknown override: {override!r}")
