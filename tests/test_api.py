import pytest

from hris_system.database.memory import MemoryDatabase
from hris_system.main import create_app

EMPLOYEE = {
    "firstName": "Jose",
    "lastName": "Reyes",
    "email": "jose@example.com",
    "position": "Warehouse Staff",
    "department": "Operations",
    "employmentType": "probationary",
    "hireDate": "2024-06-15",
    "basicSalary": 650,
    "salaryType": "daily",
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(db=MemoryDatabase())
    return app.test_client()


def _employee(client):
    response = client.post("/api/employees", json=EMPLOYEE)
    assert response.status_code == 201
    return response.get_json()["data"]["employee_id"]


def _attendance(client, employee_id, day, **extra):
    payload = {
        "employeeId": employee_id,
        "date": day,
        "scheduleIn": "09:00",
        "scheduleOut": "18:00",
        "actualIn": "09:00",
        "actualOut": "18:00",
        **extra,
    }
    return client.post("/api/attendance", json=payload)


def test_create_and_list_employees(client):
    employee_id = _employee(client)

    body = client.get("/api/employees").get_json()

    assert body["success"] is True
    assert [e["employee_id"] for e in body["data"]] == [employee_id]
    assert body["data"][0]["full_name"] == "Jose Reyes"


def test_validation_error_names_the_field(client):
    response = client.post("/api/employees", json={**EMPLOYEE, "email": "nope"})
    body = response.get_json()
    assert response.status_code == 400
    assert body["success"] is False
    assert body["field"] == "email"


def test_attendance_create_update_and_conflict(client):
    employee_id = _employee(client)

    created = _attendance(client, employee_id, "2025-03-03", actualIn="09:15")
    assert created.status_code == 201
    record = created.get_json()["data"]
    assert record["late"] == 15

    assert _attendance(client, employee_id, "2025-03-03").status_code == 409

    updated = client.patch(f"/api/attendance/{record['attendance_id']}", json={"late": 0}).get_json()["data"]
    assert updated["late"] == 0

    moved = client.patch(f"/api/attendance/{record['attendance_id']}", json={"date": "2025-03-04"})
    assert moved.status_code == 400


def test_bulk_range_saves_every_workday(client):
    employee_id = _employee(client)

    response = client.post(
        "/api/attendance/bulk-range",
        json={
            "employeeId": employee_id,
            "startDate": "2025-03-03",
            "endDate": "2025-03-09",
            "excludedDates": ["2025-03-05"],
            "applyToAll": {"timeIn": "09:00", "timeOut": "18:00"},
            "entries": {"2025-03-07": {"status": "absent"}},
        },
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["added"] == 4


def test_payroll_run_flow(client):
    employee_id = _employee(client)
    _attendance(client, employee_id, "2025-03-03")

    created = client.post(
        "/api/payroll/runs",
        json={
            "cutoffStart": "2025-03-03",
            "cutoffEnd": "2025-03-03",
            "employeeIds": [employee_id],
            "deductionsEnabled": False,
            "incentives": [{"employeeId": employee_id, "incentives": [{"name": "Bonus", "amount": 100}]}],
        },
    )
    assert created.status_code == 201
    body = created.get_json()
    run_id = body["data"]["run_id"]
    assert body["payslips"][0]["gross_pay"] == 750
    assert body["payslips"][0]["take_home_pay"] == 750

    forbidden = client.post(f"/api/payroll/runs/{run_id}/status", json={"status": "finalized"})
    assert forbidden.status_code == 403

    finalized = client.post(
        f"/api/payroll/runs/{run_id}/status",
        json={"status": "finalized"},
        headers={"X-User-Role": "hr", "X-User-Id": "4"},
    )
    assert finalized.status_code == 200
    assert finalized.get_json()["data"]["status"] == "finalized"
    assert finalized.get_json()["data"]["processed_by"] == 4

    payslip_id = body["payslips"][0]["payslip_id"]
    locked = client.patch(
        f"/api/payroll/payslips/{payslip_id}", json={"deductions": []}, headers={"X-User-Role": "hr"}
    )
    assert locked.status_code == 409


def test_payroll_report_requires_dates(client):
    response = client.get("/api/payroll/report?start=2025-03-01")
    assert response.status_code == 400
    assert response.get_json()["field"] == "end"


def test_unknown_run_and_route(client):
    assert client.get("/api/payroll/runs/99").status_code == 404
    missing = client.get("/api/nothing-here")
    assert missing.status_code == 404
    assert missing.get_json()["success"] is False


def test_employee_template_download(client):
    response = client.get("/api/employees/template.csv")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert response.data.decode("utf-8-sig").startswith("firstName,lastName")


def test_malformed_ids_and_clock_values_are_bad_requests(client):
    employee_id = _employee(client)

    preview = client.post("/api/payroll/preview", json={"employeeId": "abc"})
    assert preview.status_code == 400
    assert preview.get_json()["field"] == "employeeId"

    report = client.get("/api/payroll/report?start=2025-03-01&end=2025-03-15&employeeId=x")
    assert report.status_code == 400

    numeric_clock = _attendance(client, employee_id, "2025-03-03", actualIn=930)
    assert numeric_clock.status_code == 400
    assert numeric_clock.get_json()["field"] == "actualIn"
