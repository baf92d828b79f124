"""Clock arithmetic on "HH:MM" strings.

All helpers work in minutes since midnight. Late is reported in minutes,
undertime/overtime in hours, matching how attendance records store them.
"""

from __future__ import annotations

import re
from typing import Optional

from ..core.constants import (
    LUNCH_BREAK_MINUTES,
    MINUTES_PER_DAY,
    NIGHT_SHIFT_END_MINUTES,
    NIGHT_SHIFT_START_MINUTES,
)
from ..core.exceptions import ValidationError

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def time_to_minutes(value: Optional[str]) -> int:
    """Convert "HH:MM" (24-hour) to minutes since midnight.

    Empty or missing input counts as 0; anything else that is not a clock
    time raises ValidationError.
    """
    if not value or not value.strip():
        return 0
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValidationError(f"Invalid time: {value!r}", field="time")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time: {value!r}", field="time")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_12_hour(value: Optional[str]) -> str:
    """Display helper: "14:05" -> "2:05 PM". Returns "" for empty or bad input."""
    if not value:
        return ""
    try:
        total = time_to_minutes(value)
    except ValidationError:
        return ""
    hours, minutes = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{minutes:02d} {period}"


_AMPM_RE = re.compile(r"^(\d{1,2})(?:[:\s]+(\d{1,2}))?\s*(AM|PM)$", re.IGNORECASE)
_LOOSE_RE = re.compile(r"^(\d{1,2}):?(\d{2})?$")


def normalize_clock_time(value: Optional[str]) -> Optional[str]:
    """Read "8:58 AM", "18:06", "0930" or "9" into "HH:MM"; None if unreadable."""
    s = (value or "").strip()
    if not s:
        return None
    match = _AMPM_RE.match(s)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if hours > 12 or minutes > 59:
            return None
        suffix = match.group(3).upper()
        if suffix == "PM" and hours != 12:
            hours += 12
        if suffix == "AM" and hours == 12:
            hours = 0
        return f"{hours:02d}:{minutes:02d}"
    match = _LOOSE_RE.match(s)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if hours <= 23 and minutes <= 59:
            return f"{hours:02d}:{minutes:02d}"
    return None


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def calculate_undertime(schedule_out: str, actual_out: Optional[str]) -> float:
    """Hours the employee clocked out before the scheduled end."""
    if is_blank(actual_out):
        return 0.0
    diff = time_to_minutes(schedule_out) - time_to_minutes(actual_out)
    return max(0, diff) / 60


def calculate_undertime_lunch_adjusted(
    schedule_in: str,
    schedule_out: str,
    actual_in: Optional[str],
    actual_out: Optional[str],
) -> float:
    """Older edit-dialog formula: compares worked spans, both minus lunch.

    Unlike calculate_undertime this also charges a late arrival as undertime.
    Kept for callers that still expect that behaviour.
    """
    if is_blank(actual_in) or is_blank(actual_out):
        return 0.0
    scheduled = time_to_minutes(schedule_out) - time_to_minutes(schedule_in) - LUNCH_BREAK_MINUTES
    actual = time_to_minutes(actual_out) - time_to_minutes(actual_in) - LUNCH_BREAK_MINUTES
    return max(0.0, (scheduled - actual) / 60)


def calculate_late(schedule_in: str, actual_in: Optional[str], undertime: float = 0.0) -> int:
    """Minutes late. An employee who already has undertime is not also late."""
    if is_blank(actual_in) or (undertime or 0) > 0:
        return 0
    return max(0, time_to_minutes(actual_in) - time_to_minutes(schedule_in))


def calculate_overtime(schedule_out: str, actual_out: Optional[str]) -> float:
    """Hours worked past the scheduled end; listing display only."""
    if is_blank(actual_out):
        return 0.0
    return max(0, time_to_minutes(actual_out) - time_to_minutes(schedule_out)) / 60


def calculate_night_diff_hours(actual_in: Optional[str], actual_out: Optional[str]) -> float:
    """Hours of the worked span that fall between 22:00 and 06:00.

    A clock-out earlier than the clock-in is taken as the next day.
    """
    if is_blank(actual_in) or is_blank(actual_out):
        return 0.0
    start = time_to_minutes(actual_in)
    end = time_to_minutes(actual_out)
    if end <= start:
        end += MINUTES_PER_DAY

    night_minutes = 0
    # windows: [00:00,06:00), [22:00,30:00), [46:00,48:00)
    windows = (
        (0, NIGHT_SHIFT_END_MINUTES),
        (NIGHT_SHIFT_START_MINUTES, MINUTES_PER_DAY + NIGHT_SHIFT_END_MINUTES),
        (MINUTES_PER_DAY + NIGHT_SHIFT_START_MINUTES, 2 * MINUTES_PER_DAY),
    )
    for lo, hi in windows:
        overlap = min(end, hi) - max(start, lo)
        if overlap > 0:
            night_minutes += overlap
    return night_minutes / 60
