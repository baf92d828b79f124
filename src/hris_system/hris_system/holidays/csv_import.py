from __future__ import annotations

from ..common.datetime_utils import parse_flexible_date
from ..core.enums import HolidayType
from .model import HolidayInput


def _holiday_type(raw: str) -> HolidayType:
    raw = raw.lower()
    if raw == HolidayType.SPECIAL_WORKING.value:
        return HolidayType.SPECIAL_WORKING
    if raw == HolidayType.SPECIAL.value:
        return HolidayType.SPECIAL
    return HolidayType.REGULAR


def parse_holiday_lines(text: str) -> list[HolidayInput]:
    """Parse ``Name,Date,Type,Recurring`` lines.

    Lines with fewer than four columns or an unreadable date (a header line
    included) are dropped without an error.
    """
    holidays: list[HolidayInput] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        parts = [p.strip() for p in line.split(",")]
        if len(parts) < 4:
            continue
        name, date_str, type_str, recurring_str = parts[:4]
        holiday_date = parse_flexible_date(date_str)
        if holiday_date is None:
            continue
        is_recurring = recurring_str.lower() == "true"
        holidays.append(
            HolidayInput(
                name=name,
                holiday_date=holiday_date,
                type=_holiday_type(type_str),
                is_recurring=is_recurring,
                year=None if is_recurring else holiday_date.year,
            )
        )
    return holidays
