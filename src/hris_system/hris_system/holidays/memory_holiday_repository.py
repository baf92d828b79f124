from __future__ import annotations

from typing import Optional, Sequence

from ..database.memory import MemoryDatabase
from .model import Holiday, HolidayInput
from .repository import HolidayRepository

_TABLE = "holidays"


class MemoryHolidayRepository(HolidayRepository):
    def __init__(self, db: MemoryDatabase):
        self._db = db

    def list_for_organization(self, organization_id: int) -> Sequence[Holiday]:
        return [h for h in self._db.table(_TABLE).values() if h.organization_id == int(organization_id)]

    def create(self, organization_id: int, holiday: HolidayInput) -> int:
        with self._db.transaction() as db:
            holiday_id = db.next_id(_TABLE)
            db.table(_TABLE)[holiday_id] = Holiday(
                holiday_id=holiday_id,
                organization_id=int(organization_id),
                name=holiday.name,
                holiday_date=holiday.holiday_date,
                type=holiday.type,
                is_recurring=holiday.is_recurring,
                year=None if holiday.is_recurring else (holiday.year or holiday.holiday_date.year),
            )
            return holiday_id

    def delete(self, holiday_id: int) -> bool:
        with self._db.transaction() as db:
            return db.table(_TABLE).pop(int(holiday_id), None) is not None

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        return self._db.table(_TABLE).get(int(holiday_id))
