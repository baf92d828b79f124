from __future__ import annotations

from flask import Flask, request

from ..common.api import json_body, ok, organization_id
from ..common.datetime_utils import coerce_date
from ..common.validators import parse_number, require_non_empty
from ..core.enums import EmploymentStatus, RecurringFrequency
from ..core.exceptions import ValidationError
from ..schedules.model import schedule_from_dict, schedule_to_dict
from .csv_utils import export_employees_csv, get_employee_csv_template
from .model import RecurringDeduction


def _recurring_from_payload(raw: dict) -> RecurringDeduction:
    name = require_non_empty(raw.get("name"), "name", message="Deduction name is required")
    try:
        frequency = RecurringFrequency(raw.get("frequency") or RecurringFrequency.PER_CUTOFF.value)
    except ValueError:
        raise ValidationError(f"Invalid frequency: {raw.get('frequency')!r}", field="frequency") from None
    return RecurringDeduction(
        name=name,
        amount=parse_number(raw.get("amount"), "amount", label=name),
        type=str(raw.get("type") or "loan"),
        frequency=frequency,
        start_date=coerce_date(raw["startDate"], "startDate") if raw.get("startDate") else None,
        end_date=coerce_date(raw["endDate"], "endDate") if raw.get("endDate") else None,
        is_active=bool(raw.get("isActive", True)),
    )


def register(app: Flask, container) -> None:
    employees = container.employee_service

    def _csv_response(text: str, filename: str):
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        status = request.args.get("status")
        try:
            status_filter = EmploymentStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Invalid status: {status!r}", field="status") from None
        rows = employees.get_employees(
            organization_id(container.default_organization_id),
            department=request.args.get("department") or None,
            status=status_filter,
        )
        return ok(rows)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="api_employee")
    def api_employee(employee_id: int):
        employee = employees.get_employee(employee_id)
        return ok(employee, schedule=schedule_to_dict(employee.schedule))

    @app.route("/api/employees", methods=["POST"], endpoint="api_employees_create")
    def api_employees_create():
        data = json_body()
        org = organization_id(container.default_organization_id)
        schedule = schedule_from_dict(data["schedule"]) if data.get("schedule") else None
        values = {k: (None if v is None else str(v)) for k, v in data.items() if not isinstance(v, (dict, list))}
        employee_id = employees.create_employee(
            organization_id=org,
            values=values,
            schedule=schedule,
            recurring_deductions=[_recurring_from_payload(d) for d in data.get("deductions") or ()],
        )
        return ok(employees.get_employee(employee_id), status=201)

    @app.route("/api/employees/import", methods=["POST"], endpoint="api_employees_import")
    def api_employees_import():
        org = organization_id(container.default_organization_id)
        settings = container.settings_service.get_settings(org)
        parsed, result = employees.import_csv(
            organization_id=org,
            text=str(json_body().get("csv") or ""),
            payroll_settings=settings.payroll_settings,
        )
        invalid = [{"row": r.row_index, "errors": r.errors} for r in parsed.invalid_rows]
        status = 207 if invalid or result.is_partial_failure else 200
        return ok(result.to_dict(), status=status, invalidRows=invalid)

    @app.route("/api/employees/template.csv", methods=["GET"], endpoint="api_employees_template")
    def api_employees_template():
        return _csv_response(get_employee_csv_template(), "employee_template.csv")

    @app.route("/api/employees/export.csv", methods=["GET"], endpoint="api_employees_export")
    def api_employees_export():
        rows = employees.get_employees(organization_id(container.default_organization_id))
        return _csv_response(export_employees_csv(rows), "employees.csv")

    @app.route("/api/employees/<int:employee_id>/schedule", methods=["PUT"], endpoint="api_employee_schedule")
    def api_employee_schedule(employee_id: int):
        employee = employees.update_schedule(employee_id, schedule_from_dict(json_body()))
        return ok(schedule_to_dict(employee.schedule))

    @app.route("/api/employees/<int:employee_id>/deductions", methods=["PUT"], endpoint="api_employee_deductions")
    def api_employee_deductions(employee_id: int):
        items = json_body().get("deductions") or []
        employee = employees.set_recurring_deductions(employee_id, [_recurring_from_payload(d) for d in items])
        return ok(employee.recurring_deductions)

    @app.route("/api/employees/<int:employee_id>/status", methods=["PUT"], endpoint="api_employee_status")
    def api_employee_status(employee_id: int):
        raw = json_body().get("status")
        try:
            status = EmploymentStatus(raw)
        except ValueError:
            raise ValidationError(f"Invalid status: {raw!r}", field="status") from None
        return ok(employees.set_status(employee_id, status))
