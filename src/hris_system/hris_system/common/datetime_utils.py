from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ..core.exceptions import ValidationError

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_flexible_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD or MM/DD/YYYY; None when neither matches."""
    value = (value or "").strip()
    for fmt in ("%Y-%m-%d", "%m/%d/%Y"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def coerce_date(value, field_name: str = "date") -> date:
    """Accept a date or an ISO string (API payloads), raise ValidationError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}", field=field_name) from None


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def format_period(start: date, end: date) -> str:
    return f"{start.isoformat()} to {end.isoformat()}"
