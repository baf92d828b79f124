"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60
LUNCH_BREAK_MINUTES = 60
STANDARD_WORK_HOURS = 8

NIGHT_SHIFT_START_MINUTES = 22 * 60
NIGHT_SHIFT_END_MINUTES = 6 * 60

REST_DAY_PREMIUM = 0.3
HALF_DAY_MULTIPLIER = 0.5

# Per-employee rates fall back to organisation settings, then to these.
DEFAULT_PAYROLL_RATES = {
    "regular_holiday_rate": 1.0,
    "special_holiday_rate": 0.3,
    "night_diff_percent": 0.1,
    "overtime_regular_rate": 1.25,
    "overtime_rest_day_rate": 1.69,
    "regular_holiday_ot_rate": 2.0,
    "special_holiday_ot_rate": 1.69,
}

DEFAULT_LEAVE_TYPES = (
    {"type": "vacation", "name": "Vacation Leave", "default_credits": 15, "is_paid": True, "requires_approval": True},
    {"type": "sick", "name": "Sick Leave", "default_credits": 15, "is_paid": True, "requires_approval": True},
    {"type": "emergency", "name": "Emergency Leave", "default_credits": 5, "is_paid": True, "requires_approval": True},
)

PAID_LEAVE_TYPES = frozenset({"vacation", "sick", "maternity", "paternity"})

MAX_REPORTED_ERRORS = 20

SSS_MAX_MSC = 30000
SSS_EMPLOYEE_RATE = 0.045
PHILHEALTH_RATE = 0.03
PAGIBIG_RATE = 0.02
PAGIBIG_MAX = 100
