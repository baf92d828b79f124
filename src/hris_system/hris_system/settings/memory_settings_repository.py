from __future__ import annotations

from typing import Optional

from ..database.memory import MemoryDatabase
from .model import OrganizationSettings
from .repository import SettingsRepository

_TABLE = "organization_settings"


class MemorySettingsRepository(SettingsRepository):
    """Settings are keyed by organisation id rather than a generated id."""

    def __init__(self, db: MemoryDatabase):
        self._db = db

    def get(self, organization_id: int) -> Optional[OrganizationSettings]:
        return self._db.table(_TABLE).get(int(organization_id))

    def save(self, settings: OrganizationSettings) -> None:
        with self._db.transaction() as db:
            db.table(_TABLE)[settings.organization_id] = settings
