from __future__ import annotations

from flask import Flask, request

from ..common.api import current_role, current_user_id, date_arg, json_body, ok, organization_id
from ..common.validators import parse_id, parse_optional_number
from ..core.enums import LineItemType
from ..core.exceptions import ValidationError
from .payload import government_settings_from_payload, line_items_from_payload, run_changes_from_payload, run_spec_from_payload


def register(app: Flask, container) -> None:
    payroll = container.payroll_service

    @app.route("/api/payroll/preview", methods=["POST"], endpoint="api_payroll_preview")
    def api_payroll_preview():
        data = json_body()
        employee = container.employee_service.get_employee(parse_id(data.get("employeeId"), "employeeId"))
        changes = run_changes_from_payload({**data, "employeeIds": [employee.employee_id]})
        if "cutoff_start" not in changes or "cutoff_end" not in changes:
            raise ValidationError("cutoffStart and cutoffEnd are required", field="cutoffStart")
        gov = data.get("governmentDeductionSettings")
        payslip = payroll.compute_employee_payroll(
            employee,
            cutoff_start=changes["cutoff_start"],
            cutoff_end=changes["cutoff_end"],
            deductions_enabled=changes.get("deductions_enabled", True),
            manual_deductions=line_items_from_payload(data.get("deductions"), default_type=LineItemType.OTHER.value),
            government_settings=government_settings_from_payload(gov) if gov else None,
            incentives=line_items_from_payload(data.get("incentives"), default_type=LineItemType.INCENTIVE.value),
            paid_leave_dates=changes.get("paid_leave_dates", {}).get(employee.employee_id, ()),
        )
        return ok(payslip)

    @app.route("/api/payroll/runs", methods=["GET"], endpoint="api_payroll_runs")
    def api_payroll_runs():
        return ok(payroll.get_payroll_runs(organization_id(container.default_organization_id)))

    @app.route("/api/payroll/runs", methods=["POST"], endpoint="api_payroll_runs_create")
    def api_payroll_runs_create():
        spec = run_spec_from_payload(
            json_body(),
            organization_id=organization_id(container.default_organization_id),
            processed_by=current_user_id(),
        )
        run = payroll.create_payroll_run(spec)
        return ok(run, status=201, payslips=payroll.get_payslips(run.run_id))

    @app.route("/api/payroll/runs/<int:run_id>", methods=["GET"], endpoint="api_payroll_run")
    def api_payroll_run(run_id: int):
        return ok(payroll.get_payroll_run(run_id), payslips=payroll.get_payslips(run_id))

    @app.route("/api/payroll/runs/<int:run_id>", methods=["PATCH"], endpoint="api_payroll_run_update")
    def api_payroll_run_update(run_id: int):
        run = payroll.update_payroll_run(run_id, run_changes_from_payload(json_body()))
        return ok(run, payslips=payroll.get_payslips(run_id))

    @app.route("/api/payroll/runs/<int:run_id>/status", methods=["POST"], endpoint="api_payroll_run_status")
    def api_payroll_run_status(run_id: int):
        data = json_body()
        run = payroll.update_payroll_run_status(
            run_id,
            str(data.get("status") or ""),
            current_role=current_role(),
            processed_by=current_user_id(),
        )
        return ok(run)

    @app.route("/api/payroll/runs/<int:run_id>", methods=["DELETE"], endpoint="api_payroll_run_delete")
    def api_payroll_run_delete(run_id: int):
        payroll.delete_payroll_run(run_id)
        return ok({"id": run_id})

    @app.route("/api/payroll/payslips/<int:payslip_id>", methods=["PATCH"], endpoint="api_payslip_update")
    def api_payslip_update(payslip_id: int):
        data = json_body()
        deductions = None
        if "deductions" in data:
            deductions = line_items_from_payload(data["deductions"], default_type=LineItemType.OTHER.value)
        incentives = None
        if "incentives" in data:
            incentives = line_items_from_payload(data["incentives"], default_type=LineItemType.INCENTIVE.value)
        allowance = data.get("nonTaxableAllowance")
        payslip = payroll.update_payslip(
            payslip_id,
            current_role=current_role(),
            edited_by=current_user_id(),
            deductions=deductions,
            incentives=incentives,
            non_taxable_allowance=parse_optional_number(allowance, "nonTaxableAllowance"),
        )
        return ok(payslip)

    @app.route("/api/payroll/report", methods=["GET"], endpoint="api_payroll_report")
    def api_payroll_report():
        employee_id = request.args.get("employeeId")
        data = container.payroll_report_service.build_attendance_report(
            organization_id=organization_id(container.default_organization_id),
            start=date_arg("start"),
            end=date_arg("end"),
            employee_id=parse_id(employee_id, "employeeId", required=False),
        )
        return ok(data.summary, rows=data.rows)
