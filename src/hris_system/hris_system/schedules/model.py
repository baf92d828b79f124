from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import WEEKDAY_NAMES, iter_dates, month_bounds, parse_iso_date, weekday_name


@dataclass(frozen=True)
class DaySchedule:
    """Working hours for one weekday ("HH:MM" strings)."""

    time_in: str
    time_out: str
    is_workday: bool = True


@dataclass(frozen=True)
class ScheduleOverride:
    """A one-off working day with its own hours (e.g. a make-up Saturday)."""

    work_date: date
    time_in: str
    time_out: str


@dataclass(frozen=True)
class WeeklySchedule:
    default_schedule: dict[str, DaySchedule]
    overrides: tuple[ScheduleOverride, ...] = field(default_factory=tuple)

    def for_weekday(self, name: str) -> DaySchedule:
        return self.default_schedule.get(name) or DaySchedule(time_in="09:00", time_out="18:00", is_workday=False)

    def for_date(self, day: date) -> DaySchedule:
        override = self.override_for(day)
        if override:
            return DaySchedule(time_in=override.time_in, time_out=override.time_out, is_workday=True)
        return self.for_weekday(weekday_name(day))

    def override_for(self, day: date) -> Optional[ScheduleOverride]:
        for o in self.overrides:
            if o.work_date == day:
                return o
        return None

    def is_rest_day(self, day: date) -> bool:
        """A non-workday with no override for that date."""
        if self.override_for(day):
            return False
        return not self.for_weekday(weekday_name(day)).is_workday

    def working_days(self, start: date, end: date) -> list[date]:
        return [d for d in iter_dates(start, end) if not self.is_rest_day(d)]

    def working_days_in_month(self, day: date) -> int:
        first, last = month_bounds(day)
        # an all-rest-day schedule falls back to a 26-day month
        return len(self.working_days(first, last)) or 26


def build_weekly_schedule(
    *,
    time_in: str = "09:00",
    time_out: str = "18:00",
    workdays: Iterable[str] = WEEKDAY_NAMES[:5],
    overrides: Iterable[ScheduleOverride] = (),
) -> WeeklySchedule:
    workdays = set(workdays)
    return WeeklySchedule(
        default_schedule={
            name: DaySchedule(time_in=time_in, time_out=time_out, is_workday=name in workdays) for name in WEEKDAY_NAMES
        },
        overrides=tuple(overrides),
    )


# Mon-Fri 09:00-18:00, used for imported employees.
DEFAULT_BULK_SCHEDULE = build_weekly_schedule()


def schedule_from_dict(data: dict) -> WeeklySchedule:
    """Build from the API shape ``{"monday": {"in", "out", "isWorkday"}, ...}``."""
    days = {}
    for name in WEEKDAY_NAMES:
        raw = data.get(name)
        if raw is None:
            continue
        days[name] = DaySchedule(
            time_in=str(raw.get("in", "09:00")),
            time_out=str(raw.get("out", "18:00")),
            is_workday=bool(raw.get("isWorkday", raw.get("is_workday", False))),
        )
    overrides = tuple(
        ScheduleOverride(
            work_date=parse_iso_date(str(o["date"])),
            time_in=str(o.get("in", "09:00")),
            time_out=str(o.get("out", "18:00")),
        )
        for o in data.get("overrides", ())
    )
    return WeeklySchedule(default_schedule=days, overrides=overrides)


def schedule_to_dict(schedule: WeeklySchedule) -> dict:
    return {
        name: {"in": d.time_in, "out": d.time_out, "isWorkday": d.is_workday}
        for name, d in schedule.default_schedule.items()
    }
