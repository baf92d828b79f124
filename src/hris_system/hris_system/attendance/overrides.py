"""Manual late/undertime overrides.

An edit can leave a derived value alone, ask for it to be recomputed, or pin
it to an explicit number (0 included). On the wire these map to: key absent,
``null``, and a number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from ..common.validators import parse_number, require_non_negative


@dataclass(frozen=True)
class Keep:
    pass


@dataclass(frozen=True)
class Recalculate:
    pass


@dataclass(frozen=True)
class SetTo:
    value: float


Override = Union[Keep, Recalculate, SetTo]

KEEP = Keep()
RECALCULATE = Recalculate()


def override_from_payload(payload: Mapping[str, Any], key: str) -> Override:
    if key not in payload:
        return KEEP
    raw = payload[key]
    if raw is None:
        return RECALCULATE
    value = require_non_negative(parse_number(raw, key), key)
    return SetTo(value)
