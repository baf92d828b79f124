from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.validators import require_non_empty
from ..core.enums import HolidayType
from ..core.exceptions import NotFoundError, ValidationError
from .csv_import import parse_holiday_lines
from .model import Holiday, HolidayInput
from .repository import HolidayRepository

logger = logging.getLogger(__name__)

# (name, month, day)
PH_REGULAR_HOLIDAYS = (
    ("New Year's Day", 1, 1),
    ("Araw ng Kagitingan", 4, 9),
    ("Labor Day", 5, 1),
    ("Independence Day", 6, 12),
    ("National Heroes Day", 8, 25),
    ("Bonifacio Day", 11, 30),
    ("Rizal Day", 12, 30),
)

PH_SPECIAL_HOLIDAYS = (
    ("EDSA People Power Revolution Anniversary", 2, 25),
    ("Ninoy Aquino Day", 8, 21),
    ("All Saints' Day", 11, 1),
    ("All Souls' Day", 11, 2),
    ("Feast of the Immaculate Conception", 12, 8),
    ("Christmas Eve", 12, 24),
    ("New Year's Eve", 12, 31),
)


@dataclass(frozen=True)
class HolidayBulkResult:
    created: int
    skipped: int
    results: list[dict]


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_holidays(self, organization_id: int, *, year: Optional[int] = None) -> list[Holiday]:
        rows = list(self._holidays.list_for_organization(int(organization_id)))
        if year:
            rows = [h for h in rows if h.is_recurring or h.year == int(year)]
        rows.sort(key=lambda h: h.holiday_date)
        return rows

    def create_holiday(self, organization_id: int, holiday: HolidayInput) -> int:
        require_non_empty(holiday.name, "name", message="Holiday name is required")
        return self._holidays.create(int(organization_id), holiday)

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")

    def bulk_create_holidays(self, organization_id: int, holidays: Iterable[HolidayInput]) -> HolidayBulkResult:
        """Insert in order, skipping any holiday already on that date with the same name (case-insensitive)."""
        results: list[dict] = []
        for holiday in holidays:
            existing = self._holidays.list_for_organization(int(organization_id))
            duplicate = next(
                (
                    h
                    for h in existing
                    if h.holiday_date == holiday.holiday_date and h.name.lower() == holiday.name.lower()
                ),
                None,
            )
            if duplicate:
                results.append(
                    {"id": duplicate.holiday_id, "name": holiday.name, "action": "skipped", "reason": "Already exists"}
                )
                continue
            holiday_id = self._holidays.create(int(organization_id), holiday)
            results.append({"id": holiday_id, "name": holiday.name, "action": "created"})

        created = sum(1 for r in results if r["action"] == "created")
        skipped = len(results) - created
        logger.info("[holidays] org=%s bulk create: created=%s skipped=%s", organization_id, created, skipped)
        return HolidayBulkResult(created=created, skipped=skipped, results=results)

    def import_csv(self, organization_id: int, text: str) -> HolidayBulkResult:
        holidays = parse_holiday_lines(text)
        if not holidays:
            raise ValidationError("No valid holidays found in the input", field="holidays")
        return self.bulk_create_holidays(organization_id, holidays)

    def initialize_philippine_holidays(self, organization_id: int, year: int) -> HolidayBulkResult:
        """Seed the fixed-date national holidays: regular ones recurring, special ones for ``year``."""
        seed = [
            HolidayInput(name=name, holiday_date=date(year, m, d), type=HolidayType.REGULAR, is_recurring=True)
            for name, m, d in PH_REGULAR_HOLIDAYS
        ] + [
            HolidayInput(
                name=name, holiday_date=date(year, m, d), type=HolidayType.SPECIAL, is_recurring=False, year=year
            )
            for name, m, d in PH_SPECIAL_HOLIDAYS
        ]
        return self.bulk_create_holidays(organization_id, seed)

    def holidays_between(self, organization_id: int, start: date, end: date) -> dict[date, Holiday]:
        """Map each date in [start, end] that is a holiday to its holiday."""
        found: dict[date, Holiday] = {}
        rows = self._holidays.list_for_organization(int(organization_id))
        for h in rows:
            if h.is_recurring:
                for year in range(start.year, end.year + 1):
                    try:
                        day = h.holiday_date.replace(year=year)
                    except ValueError:  # Feb 29
                        continue
                    if start <= day <= end:
                        found.setdefault(day, h)
            elif start <= h.holiday_date <= end:
                found.setdefault(h.holiday_date, h)
        return found
