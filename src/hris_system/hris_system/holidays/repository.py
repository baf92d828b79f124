from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Holiday, HolidayInput


class HolidayRepository(Protocol):
    def list_for_organization(self, organization_id: int) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, organization_id: int, holiday: HolidayInput) -> int:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError
