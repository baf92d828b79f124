from __future__ import annotations

from typing import Optional

from ...common.time_utils import calculate_late, calculate_undertime
from ..model import AttendanceEntry, ResolvedAttendance
from ..overrides import Override
from .base import AttendanceStrategy, apply_override


class PresentStrategy(AttendanceStrategy):
    """Present: undertime from the clock-out, late only when there is no undertime."""

    def resolve(
        self,
        entry: AttendanceEntry,
        *,
        late: Override,
        undertime: Override,
        current_late: Optional[int] = None,
        current_undertime: Optional[float] = None,
    ) -> ResolvedAttendance:
        resolved_undertime = float(
            apply_override(
                undertime,
                current=current_undertime,
                compute=lambda: calculate_undertime(entry.schedule_out, entry.actual_out),
            )
        )
        resolved_late = int(
            apply_override(
                late,
                current=current_late,
                compute=lambda: calculate_late(entry.schedule_in, entry.actual_in, resolved_undertime),
            )
        )
        return ResolvedAttendance(
            actual_in=entry.actual_in or None,
            actual_out=entry.actual_out or None,
            late=resolved_late,
            undertime=resolved_undertime,
            overtime=entry.overtime,
        )
