from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, request

from ..common.api import batch_response, date_arg, json_body, ok, organization_id
from ..common.datetime_utils import coerce_date
from ..common.validators import parse_id, parse_optional_number, require_non_empty
from ..core.enums import AttendanceStatus, HolidayType
from ..core.exceptions import ValidationError
from .model import AttendanceEntry
from .overrides import override_from_payload

# camelCase payload key -> AttendanceEntry field
_FIELD_MAP = {
    "scheduleIn": "schedule_in",
    "scheduleOut": "schedule_out",
    "actualIn": "actual_in",
    "actualOut": "actual_out",
    "status": "status",
    "overtime": "overtime",
    "isHoliday": "is_holiday",
    "holidayType": "holiday_type",
    "remarks": "remarks",
}

_CLOCK_FIELDS = {
    "schedule_in": "scheduleIn",
    "schedule_out": "scheduleOut",
    "actual_in": "actualIn",
    "actual_out": "actualOut",
}


def _convert(field: str, value: Any) -> Any:
    if field in _CLOCK_FIELDS:
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"Invalid time: {value!r}", field=_CLOCK_FIELDS[field])
        return value
    if field == "overtime":
        return parse_optional_number(value, "overtime", label="Overtime")
    if field == "status":
        try:
            return AttendanceStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid status: {value!r}", field="status") from None
    if field == "holiday_type":
        if not value:
            return None
        try:
            return HolidayType(value)
        except ValueError:
            raise ValidationError(f"Invalid holiday type: {value!r}", field="holidayType") from None
    if field == "is_holiday":
        return None if value is None else bool(value)
    return value


def entry_from_payload(data: Mapping[str, Any], *, organization_id: int) -> AttendanceEntry:
    employee_id = parse_id(data.get("employeeId"), "employeeId")
    values = {field: _convert(field, data[key]) for key, field in _FIELD_MAP.items() if key in data}
    values.setdefault("status", AttendanceStatus.PRESENT)
    return AttendanceEntry(
        organization_id=int(organization_id),
        employee_id=employee_id,
        work_date=coerce_date(data.get("date"), "date"),
        schedule_in=require_non_empty(values.pop("schedule_in", None), "scheduleIn"),
        schedule_out=require_non_empty(values.pop("schedule_out", None), "scheduleOut"),
        **values,
    )


def changes_from_payload(data: Mapping[str, Any]) -> dict[str, Any]:
    changes = {field: _convert(field, data[key]) for key, field in _FIELD_MAP.items() if key in data}
    if "date" in data:
        raise ValidationError("The date of an attendance record cannot be changed", field="date")
    return changes


def register(app: Flask, container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        employee_id = request.args.get("employeeId")
        rows = attendance.get_listing(
            organization_id=organization_id(container.default_organization_id),
            start=date_arg("start"),
            end=date_arg("end"),
            employee_id=parse_id(employee_id, "employeeId", required=False),
        )
        return ok(rows)

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_create")
    def api_attendance_create():
        data = json_body()
        entry = entry_from_payload(data, organization_id=organization_id(container.default_organization_id))
        attendance_id = attendance.create_attendance(
            entry,
            late=override_from_payload(data, "late"),
            undertime=override_from_payload(data, "undertime"),
        )
        return ok(attendance.get_record(attendance_id), status=201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="api_attendance_update")
    def api_attendance_update(attendance_id: int):
        data = json_body()
        record = attendance.update_attendance(
            attendance_id,
            changes_from_payload(data),
            late=override_from_payload(data, "late"),
            undertime=override_from_payload(data, "undertime"),
        )
        return ok(record)

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    def api_attendance_delete(attendance_id: int):
        attendance.delete_attendance(attendance_id)
        return ok({"id": attendance_id})

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="api_attendance_bulk")
    def api_attendance_bulk():
        data = json_body()
        org = organization_id(container.default_organization_id)
        records = data.get("records")
        if not isinstance(records, list):
            raise ValidationError("records must be a list", field="records")
        entries = [entry_from_payload(r, organization_id=org) for r in records]
        return batch_response(attendance.bulk_create_attendance(entries))

    @app.route("/api/attendance/bulk-range", methods=["POST"], endpoint="api_attendance_bulk_range")
    def api_attendance_bulk_range():
        """Bulk entry over a date range: the draft is rebuilt from the request each time."""
        data = json_body()
        draft = attendance.start_bulk_draft(
            parse_id(data.get("employeeId"), "employeeId"),
            start_date=coerce_date(data.get("startDate"), "startDate"),
            end_date=coerce_date(data.get("endDate"), "endDate"),
            include_saturday=bool(data.get("includeSaturday", False)),
            include_sunday=bool(data.get("includeSunday", False)),
        )
        for raw in data.get("excludedDates") or ():
            draft.exclude(coerce_date(raw, "excludedDates"))
        if data.get("applyToAll"):
            draft.apply_to_all(**_day_values(data["applyToAll"]))
        for iso, values in (data.get("entries") or {}).items():
            draft.set_day(coerce_date(iso, "entries"), **_day_values(values))
        return batch_response(attendance.submit_bulk_draft(draft))

    @app.route("/api/attendance/import", methods=["POST"], endpoint="api_attendance_import")
    def api_attendance_import():
        data = json_body()
        rows, result = attendance.import_csv(
            organization_id=organization_id(container.default_organization_id),
            text=str(data.get("csv") or ""),
            include_saturday=bool(data.get("includeSaturday", True)),
            include_sunday=bool(data.get("includeSunday", True)),
        )
        errors = [{"row": r.row_index, "employee": r.employee_key, "error": r.error} for r in rows if r.error]
        return ok(result.to_dict(), status=207 if errors or result.failed else 200, rowErrors=errors)


def _day_values(raw: Mapping[str, Any]) -> dict[str, str]:
    keys = {"timeIn": "time_in", "timeOut": "time_out", "status": "status", "overtime": "overtime", "remarks": "remarks"}
    return {field: str(raw[key]) for key, field in keys.items() if key in raw and raw[key] is not None}
