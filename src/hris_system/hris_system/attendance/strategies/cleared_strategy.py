from __future__ import annotations

from typing import Optional

from ..model import AttendanceEntry, ResolvedAttendance
from ..overrides import Override
from .base import AttendanceStrategy


class ClearedStrategy(AttendanceStrategy):
    """Absent or on leave: punches and overtime are dropped whatever was sent."""

    def resolve(
        self,
        entry: AttendanceEntry,
        *,
        late: Override,
        undertime: Override,
        current_late: Optional[int] = None,
        current_undertime: Optional[float] = None,
    ) -> ResolvedAttendance:
        return ResolvedAttendance(actual_in=None, actual_out=None, late=0, undertime=0.0, overtime=None)
