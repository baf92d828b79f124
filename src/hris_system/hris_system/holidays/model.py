from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayType


@dataclass(frozen=True)
class HolidayInput:
    name: str
    holiday_date: date
    type: HolidayType
    is_recurring: bool
    year: Optional[int] = None


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    organization_id: int
    name: str
    holiday_date: date
    type: HolidayType
    is_recurring: bool
    year: Optional[int] = None
