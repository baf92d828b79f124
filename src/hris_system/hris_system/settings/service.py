from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping, Optional

from ..common.validators import parse_optional_number, require_non_negative
from ..core.constants import DEFAULT_PAYROLL_RATES
from .model import OrganizationSettings, PayrollSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self, organization_id: int) -> OrganizationSettings:
        """Stored settings, or the defaults for an organisation that never saved any."""
        stored = self._settings.get(int(organization_id))
        return stored or OrganizationSettings(organization_id=int(organization_id))

    def update_payroll_settings(self, organization_id: int, values: Mapping[str, object]) -> OrganizationSettings:
        current = self.get_settings(organization_id)
        changes: dict[str, Optional[float]] = {}
        for name in DEFAULT_PAYROLL_RATES:
            if name in values:
                number = parse_optional_number(values[name], name)
                changes[name] = None if number is None else require_non_negative(number, name)

        updated = replace(current, payroll_settings=replace(current.payroll_settings, **changes))
        self._settings.save(updated)
        logger.info("[settings] org=%s payroll rates updated: %s", organization_id, sorted(changes))
        return updated

    def update_departments(self, organization_id: int, departments: list[str]) -> OrganizationSettings:
        cleaned = tuple(dict.fromkeys(d.strip() for d in departments if d and d.strip()))
        updated = replace(self.get_settings(organization_id), departments=cleaned)
        self._settings.save(updated)
        return updated

    def set_prorated_leave(self, organization_id: int, enabled: bool) -> OrganizationSettings:
        updated = replace(self.get_settings(organization_id), prorated_leave=bool(enabled))
        self._settings.save(updated)
        return updated


def payroll_settings_to_dict(settings: PayrollSettings) -> dict:
    return {name: getattr(settings, name) for name in DEFAULT_PAYROLL_RATES}
