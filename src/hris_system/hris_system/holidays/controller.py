from __future__ import annotations

from flask import Flask, request

from ..common.api import json_body, ok, organization_id
from ..common.datetime_utils import coerce_date
from ..core.enums import HolidayType
from ..core.exceptions import ValidationError
from .model import HolidayInput


def _holiday_from_payload(data: dict) -> HolidayInput:
    try:
        holiday_type = HolidayType(data.get("type") or HolidayType.REGULAR.value)
    except ValueError:
        raise ValidationError(f"Invalid holiday type: {data.get('type')!r}", field="type") from None
    holiday_date = coerce_date(data.get("date"), "date")
    recurring = bool(data.get("isRecurring", False))
    return HolidayInput(
        name=str(data.get("name") or ""),
        holiday_date=holiday_date,
        type=holiday_type,
        is_recurring=recurring,
        year=None if recurring else holiday_date.year,
    )


def register(app: Flask, container) -> None:
    holidays = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="api_holidays")
    def api_holidays():
        year = request.args.get("year")
        rows = holidays.list_holidays(
            organization_id(container.default_organization_id),
            year=int(year) if year and year.isdigit() else None,
        )
        return ok(rows)

    @app.route("/api/holidays", methods=["POST"], endpoint="api_holidays_create")
    def api_holidays_create():
        holiday_id = holidays.create_holiday(
            organization_id(container.default_organization_id), _holiday_from_payload(json_body())
        )
        return ok({"id": holiday_id}, status=201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_holidays_delete")
    def api_holidays_delete(holiday_id: int):
        holidays.delete_holiday(holiday_id)
        return ok({"id": holiday_id})

    @app.route("/api/holidays/import", methods=["POST"], endpoint="api_holidays_import")
    def api_holidays_import():
        result = holidays.import_csv(
            organization_id(container.default_organization_id), str(json_body().get("csv") or "")
        )
        return ok(result)

    @app.route("/api/holidays/initialize", methods=["POST"], endpoint="api_holidays_initialize")
    def api_holidays_initialize():
        raw = json_body().get("year")
        try:
            year = int(raw)
        except (TypeError, ValueError):
            raise ValidationError("year is required", field="year") from None
        return ok(holidays.initialize_philippine_holidays(organization_id(container.default_organization_id), year))
