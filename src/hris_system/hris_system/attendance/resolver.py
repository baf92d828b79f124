from __future__ import annotations

from typing import Optional

from .factory import AttendanceStrategyFactory
from .model import AttendanceEntry, AttendanceRecord, ResolvedAttendance
from .overrides import KEEP, Override

_default_factory = AttendanceStrategyFactory()


def resolve_attendance(
    entry: AttendanceEntry,
    *,
    late: Override = KEEP,
    undertime: Override = KEEP,
    current: Optional[AttendanceRecord] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> ResolvedAttendance:
    """Derive the stored late/undertime/overtime/punches for one entry.

    Pure: the same entry, overrides and stored values always give the same
    result. ``current`` supplies the stored values that ``Keep`` preserves.
    """
    strategy = (factory or _default_factory).for_status(entry.status)
    return strategy.resolve(
        entry,
        late=late,
        undertime=undertime,
        current_late=current.late if current else None,
        current_undertime=current.undertime if current else None,
    )
