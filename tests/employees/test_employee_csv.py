from hris_system.employees.csv_utils import (
    EMPLOYEE_CSV_HEADERS,
    escape_csv_cell,
    export_employees_csv,
    get_employee_csv_template,
    parse_employee_csv,
)
from hris_system.employees.validation import validate_employee_form

from tests.factories import make_employee

_HEADER = ",".join(EMPLOYEE_CSV_HEADERS)


def test_template_parses_to_one_valid_row():
    parsed = parse_employee_csv(get_employee_csv_template())
    assert len(parsed.valid_rows) == 1
    assert parsed.invalid_rows == []
    assert parsed.valid_rows[0].values["email"] == "juan.delacruz@example.com"


def test_missing_email_lands_in_invalid_rows():
    text = _HEADER + "\nAna,Cruz,,,,Clerk,Admin,regular,2025-02-01,20000,,monthly\n"
    parsed = parse_employee_csv(text)
    assert parsed.valid_rows == []
    assert parsed.invalid_rows[0].row_index == 2
    assert parsed.invalid_rows[0].errors["email"] == "Email is required"


def test_blank_types_take_defaults():
    text = _HEADER + "\nAna,Cruz,,ana@example.com,,Clerk,Admin,,2025-02-01,20000,,\n"
    row = parse_employee_csv(text).valid_rows[0]
    assert row.values["employmentType"] == "probationary"
    assert row.values["salaryType"] == "monthly"


def test_header_only_has_no_rows():
    parsed = parse_employee_csv(_HEADER + "\n")
    assert parsed.valid_rows == [] and parsed.invalid_rows == []


def test_form_validation_messages():
    errors = validate_employee_form(
        {
            "firstName": "Ana",
            "lastName": "Cruz",
            "email": "not-an-email",
            "position": "Clerk",
            "department": "Admin",
            "employmentType": "intern",
            "hireDate": "02/01/2025",
            "basicSalary": "-5",
            "salaryType": "monthly",
            "nightDiffPercent": "abc",
        }
    )
    assert errors["email"] == "Please enter a valid email address"
    assert errors["employmentType"].startswith("Employment type must be one of")
    assert errors["hireDate"] == "Hire date must be a valid date (YYYY-MM-DD)"
    assert errors["basicSalary"] == "Basic salary cannot be negative"
    assert errors["nightDiffPercent"] == "Night differential must be a valid number"


def test_escape_csv_cell():
    assert escape_csv_cell("plain") == "plain"
    assert escape_csv_cell("Dela Cruz, Jr.") == '"Dela Cruz, Jr."'
    assert escape_csv_cell('say "hi"') == '"say ""hi"""'
    assert escape_csv_cell("line one\nline two") == '"line one\nline two"'
    assert escape_csv_cell(None) == ""


def test_export_writes_rates_as_percentages():
    employee = make_employee(last_name="Dela Cruz, Jr.", overtime_regular_rate=1.25)
    lines = export_employees_csv([employee]).splitlines()
    assert lines[0] == _HEADER
    assert '"Dela Cruz, Jr."' in lines[1]
    assert lines[1].split(",")[-4] == "125"
