from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.cleared_strategy import ClearedStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the resolution strategy for a status."""

    def for_status(self, status: AttendanceStatus) -> AttendanceStrategy:
        if status.clears_punches:
            return ClearedStrategy()
        if status == AttendanceStatus.HALF_DAY:
            return HalfDayStrategy()
        return PresentStrategy()
