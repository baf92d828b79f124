from __future__ import annotations

from flask import Flask

from ..common.api import json_body, ok, organization_id
from ..core.exceptions import ValidationError
from ..employees.validation import RATE_COLUMNS
from .rates import resolve_rates
from .service import payroll_settings_to_dict


def register(app: Flask, container) -> None:
    settings = container.settings_service

    def _view(org_settings):
        return {
            "organizationId": org_settings.organization_id,
            "departments": list(org_settings.departments),
            "payrollSettings": payroll_settings_to_dict(org_settings.payroll_settings),
            "effectiveRates": resolve_rates(None, org_settings.payroll_settings),
            "leaveTypes": org_settings.leave_types,
            "proratedLeave": org_settings.prorated_leave,
        }

    @app.route("/api/settings", methods=["GET"], endpoint="api_settings")
    def api_settings():
        return ok(_view(settings.get_settings(organization_id(container.default_organization_id))))

    @app.route("/api/settings/payroll", methods=["PUT"], endpoint="api_settings_payroll")
    def api_settings_payroll():
        org = organization_id(container.default_organization_id)
        values = {RATE_COLUMNS.get(k, k): v for k, v in json_body().items()}
        return ok(_view(settings.update_payroll_settings(org, values)))

    @app.route("/api/settings/departments", methods=["PUT"], endpoint="api_settings_departments")
    def api_settings_departments():
        departments = json_body().get("departments")
        if not isinstance(departments, list):
            raise ValidationError("departments must be a list", field="departments")
        org = organization_id(container.default_organization_id)
        return ok(_view(settings.update_departments(org, [str(d) for d in departments])))

    @app.route("/api/settings/prorated-leave", methods=["PUT"], endpoint="api_settings_prorated_leave")
    def api_settings_prorated_leave():
        org = organization_id(container.default_organization_id)
        return ok(_view(settings.set_prorated_leave(org, bool(json_body().get("enabled")))))
