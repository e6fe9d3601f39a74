"""
Availability schedule sync.

The stored schedule keeps one row per (month, period, teacher) with the
teacher's days comma-joined. Admins edit it as a day grid (day -> teachers);
writes invert the grid back into rows. Reads join each row with the
teacher's approved hours for that month and their pending requests.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from timebank.core.buildings import normalize_building_code
from timebank.core.errors import ValidationFailure
from timebank.db.database import transaction
from timebank.db.models.availability_slots import AvailabilitySlots
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.row_store import RowStore
from timebank.services.ledger.directory import list_staff, normalize_email, resolve_staff
from timebank.services.ledger.queries import list_pending_earned
from timebank.services.ledger.types import ZERO, PendingSummary

from .types import AvailabilityEntry, ScheduleSlot


logger = logging.getLogger(__name__)

MONTH_ORDER = [
    "September", "October", "November", "December", "January",
    "February", "March", "April", "May", "June",
]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
]

DAY_ORDER = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def school_year_window(today: date) -> tuple[date, date]:
    """Aug 1 through Jul 31 of the school year containing `today`."""
    start_year = today.year if today.month >= 8 else today.year - 1
    return date(start_year, 8, 1), date(start_year + 1, 7, 31)


def sort_days(days: Iterable[str]) -> list[str]:
    """Weekday order; labels that are not weekdays go last, alphabetically."""
    def key(day: str):
        if day in DAY_ORDER:
            return (0, DAY_ORDER.index(day), "")
        return (1, 0, day)
    return sorted(set(days), key=key)


def _require_month(month: str) -> str:
    month = str(month or "").strip()
    if month not in MONTH_ORDER:
        raise ValidationFailure(f"'{month}' is not a school month")
    return month


def calculate_monthly_hours(db: Session, today: Optional[date] = None) -> dict[tuple[str, str], Decimal]:
    """(email, month name) -> approved earned hours in the current school year."""
    start, end = school_year_window(today or date.today())
    stmt = select(EarnedRequests.email, EarnedRequests.date, EarnedRequests.hours).where(
        EarnedRequests.status == EarnedStatus.APPROVED,
        EarnedRequests.date >= start,
        EarnedRequests.date <= end,
    )

    sums: dict[tuple[str, str], Decimal] = {}
    for email, on_date, hours in db.execute(stmt).all():
        key = (normalize_email(email), MONTH_NAMES[on_date.month - 1])
        sums[key] = sums.get(key, ZERO) + Decimal(hours or 0)
    return sums


def pending_earned_map(db: Session, building: Optional[str] = None) -> dict[str, list[PendingSummary]]:
    pending: dict[str, list[PendingSummary]] = {}
    for r in list_pending_earned(db, building):
        pending.setdefault(normalize_email(r.email), []).append(PendingSummary(
            request_id=r.id,
            date=r.date,
            subbed_for=r.subbed_for,
            period=r.period,
        ))
    return pending


def read_schedule(
    db: Session,
    building: Optional[str] = None,
    today: Optional[date] = None,
) -> dict[str, list[ScheduleSlot]]:
    """
    Every school month (September..June) mapped to its slots, each carrying
    the teacher's approved hours for that month and their pending requests.
    With a building, only teachers belonging to it are included.
    """
    building = normalize_building_code(building)
    hours = calculate_monthly_hours(db, today)
    pending = pending_earned_map(db, building)

    members: Optional[set[str]] = None
    if building:
        members = {m.email for m in list_staff(db, building)}

    schedule: dict[str, list[ScheduleSlot]] = {month: [] for month in MONTH_ORDER}
    for row in RowStore(db, AvailabilitySlots).list_all():
        if row.month not in schedule:
            continue
        email = normalize_email(row.email)
        if members is not None and email not in members:
            continue
        schedule[row.month].append(ScheduleSlot(
            month=row.month,
            days=row.days,
            period=row.period,
            name=row.name,
            email=email,
            hours=hours.get((email, row.month), ZERO),
            pending_requests=list(pending.get(email, [])),
        ))
    return schedule


def write_schedule_period(
    db: Session,
    month: str,
    period: str,
    day_assignments: dict[str, list[str]],
) -> list[ScheduleSlot]:
    """
    Replace every slot for (month, period) with the given day grid.

    `day_assignments` maps a day label to the emails available that day.
    Writing the same grid twice leaves the same rows.
    """
    month = _require_month(month)
    period = str(period or "").strip()
    if not period:
        raise ValidationFailure("Period is required")

    teacher_days: dict[str, set[str]] = {}
    for day, emails in day_assignments.items():
        for email in emails or []:
            email = normalize_email(email)
            if email:
                teacher_days.setdefault(email, set()).add(day)

    slots: list[ScheduleSlot] = []
    with transaction(db):
        removed = db.execute(
            delete(AvailabilitySlots).where(
                AvailabilitySlots.month == month,
                AvailabilitySlots.period == period,
            )
        ).rowcount

        store = RowStore(db, AvailabilitySlots)
        for email in sorted(teacher_days):
            member = resolve_staff(db, email)
            name = member.name if member is not None and member.name else email
            days = ",".join(sort_days(teacher_days[email]))
            store.append_row(month=month, days=days, period=period, name=name, email=email)
            slots.append(ScheduleSlot(month=month, days=days, period=period, name=name, email=email))

    logger.info("Schedule %s / %s rebuilt: %d removed, %d written", month, period, removed, len(slots))
    return slots


def save_teacher_availability(
    db: Session,
    email: str,
    month: str,
    entries: list[AvailabilityEntry],
) -> list[ScheduleSlot]:
    """Replace one teacher's own slots for a month."""
    month = _require_month(month)
    email = normalize_email(email)
    if not email:
        raise ValidationFailure("Email is required")

    member = resolve_staff(db, email)
    name = member.name if member is not None and member.name else email

    slots: list[ScheduleSlot] = []
    with transaction(db):
        db.execute(
            delete(AvailabilitySlots).where(
                AvailabilitySlots.month == month,
                func.lower(AvailabilitySlots.email) == email,
            )
        )
        store = RowStore(db, AvailabilitySlots)
        for entry in entries:
            if not entry.period or not entry.days:
                continue
            store.append_row(month=month, days=entry.days, period=entry.period, name=name, email=email)
            slots.append(ScheduleSlot(month=month, days=entry.days, period=entry.period, name=name, email=email))

    logger.info("Availability for %s in %s saved (%d slots)", email, month, len(slots))
    return slots
