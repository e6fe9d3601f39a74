"""
Archive reconciliation.

Every earned submission leaves a raw copy in the archive table. Edits and
deletes of the canonical ledger row must reach that copy too. Rows written by
this service carry the canonical id; older rows are found by key instead:
same email, same calendar day, same period.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebank.core.errors import ArchiveMismatch
from timebank.db.models.archive_records import ArchiveRecords
from timebank.db.models.earned_requests import EarnedRequests

from .directory import normalize_email


logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def as_calendar_day(value: Optional[DateLike]) -> Optional[date]:
    """Reduce a date, datetime or ISO string to its calendar day."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def same_calendar_day(a: Optional[DateLike], b: Optional[DateLike]) -> bool:
    day_a = as_calendar_day(a)
    return day_a is not None and day_a == as_calendar_day(b)


def same_period(a: Any, b: Any) -> bool:
    """Loose comparison: 3 and "3" are the same period."""
    if a is None or b is None:
        return a is b
    return str(a).strip() == str(b).strip()


def find_archive_match(db: Session, email: str, on_date: DateLike, period: Any) -> ArchiveRecords:
    """
    Newest archive row matching (email, calendar day, period).

    Scans from the end of the table so that, when the same key was submitted
    twice, the most recent submission wins.
    """
    email = normalize_email(email)
    stmt = (
        select(ArchiveRecords)
        .where(func.lower(ArchiveRecords.email) == email)
        .order_by(ArchiveRecords.id.desc())
    )
    for record in db.execute(stmt).scalars():
        if same_calendar_day(record.covered_on, on_date) and same_period(record.period, period):
            return record
    raise ArchiveMismatch(f"No archive row for {email} on {as_calendar_day(on_date)} ({period})")


def locate_archive(db: Session, request: EarnedRequests) -> ArchiveRecords:
    """Archive row for a canonical request: by reference first, by key otherwise."""
    linked = db.execute(
        select(ArchiveRecords)
        .where(ArchiveRecords.earned_request_id == request.id)
        .order_by(ArchiveRecords.id.desc())
    ).scalars().first()
    if linked is not None:
        return linked
    return find_archive_match(db, request.email, request.date, request.period)


def locate_archive_or_log(db: Session, request: EarnedRequests, action: str) -> Optional[ArchiveRecords]:
    try:
        return locate_archive(db, request)
    except ArchiveMismatch as e:
        logger.warning("Archive mismatch on %s of earned request %s: %s", action, request.id, e)
        return None


def archive_submission(db: Session, request: EarnedRequests, other_flag: str = "") -> ArchiveRecords:
    record = ArchiveRecords(
        email=request.email,
        subbed_for=request.subbed_for,
        other_flag=other_flag,
        covered_on=datetime.combine(request.date, datetime.min.time()),
        period=request.period,
        duration_type=request.duration_type,
        hours=request.hours,
        earned_request_id=request.id,
    )
    db.add(record)
    db.flush()
    return record


def sync_archive(record: ArchiveRecords, changes: dict) -> None:
    """Copy edited canonical values onto the archive row."""
    if "subbed_for" in changes:
        record.subbed_for = changes["subbed_for"]
    if "date" in changes:
        record.covered_on = datetime.combine(changes["date"], datetime.min.time())
    if "period" in changes:
        record.period = changes["period"]
    if "duration_type" in changes:
        record.duration_type = changes["duration_type"]
    if "hours" in changes:
        record.hours = changes["hours"]
