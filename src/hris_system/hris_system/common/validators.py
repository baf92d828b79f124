from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Optional[str], field_name: str, *, message: Optional[str] = None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message or f"{field_name} is required", field=field_name)
    return str(value).strip()


def parse_number(value, field_name: str, *, label: Optional[str] = None) -> float:
    label = label or field_name
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a valid number", field=field_name) from None
    if number != number:  # NaN
        raise ValidationError(f"{label} must be a valid number", field=field_name)
    return number


def parse_optional_number(value, field_name: str, *, label: Optional[str] = None) -> Optional[float]:
    if value is None or not str(value).strip():
        return None
    return parse_number(value, field_name, label=label)


def require_non_negative(value: float, field_name: str, *, label: Optional[str] = None) -> float:
    if value < 0:
        raise ValidationError(f"{label or field_name} cannot be negative", field=field_name)
    return value


def parse_id(value, field_name: str, *, required: bool = True) -> Optional[int]:
    if value is None or not str(value).strip():
        if required:
            raise ValidationError(f"{field_name} is required", field=field_name)
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number", field=field_name)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a whole number", field=field_name) from None
