"""
Availability schedule package.

Usage:
    from timebank.services.schedule import read_schedule, write_schedule_period

    schedule = read_schedule(db, building="OMS")
    write_schedule_period(db, "October", "Period 3", {"Mon": ["a@x.org"], "Wed": ["a@x.org"]})
"""

from .types import ScheduleSlot, AvailabilityEntry
from .sync import (
    MONTH_ORDER,
    DAY_ORDER,
    school_year_window,
    sort_days,
    calculate_monthly_hours,
    pending_earned_map,
    read_schedule,
    write_schedule_period,
    save_teacher_availability,
)

__all__ = [
    "ScheduleSlot",
    "AvailabilityEntry",
    "MONTH_ORDER",
    "DAY_ORDER",
    "school_year_window",
    "sort_days",
    "calculate_monthly_hours",
    "pending_earned_map",
    "read_schedule",
    "write_schedule_period",
    "save_teacher_availability",
]
