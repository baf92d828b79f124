from __future__ import annotations

from typing import Optional

from ..model import AttendanceEntry, ResolvedAttendance
from ..overrides import Override
from .base import AttendanceStrategy, apply_override


class HalfDayStrategy(AttendanceStrategy):
    """Half day: punches are kept but a short day is expected, so nothing is derived."""

    def resolve(
        self,
        entry: AttendanceEntry,
        *,
        late: Override,
        undertime: Override,
        current_late: Optional[int] = None,
        current_undertime: Optional[float] = None,
    ) -> ResolvedAttendance:
        return ResolvedAttendance(
            actual_in=entry.actual_in or None,
            actual_out=entry.actual_out or None,
            late=int(apply_override(late, current=current_late, compute=lambda: 0)),
            undertime=float(apply_override(undertime, current=current_undertime, compute=lambda: 0.0)),
            overtime=entry.overtime,
        )
