"""
Submission ingestion.
New earned and used requests enter the ledger as PENDING rows; earned
submissions also leave a raw copy in the archive.
"""

import logging
import re
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from timebank.core.buildings import building_exists, calculate_periods, normalize_building_code
from timebank.core.config import settings
from timebank.core.errors import ValidationFailure
from timebank.db.database import transaction
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.models.used_requests import UsedRequests, UsedStatus
from timebank.db.row_store import RowStore
from timebank.schemas.earned_requests import EarnedRequestCreate
from timebank.schemas.submissions import AdminSubmission, QueuedSubmission
from timebank.schemas.used_requests import UsedRequestCreate

from .archive import archive_submission
from .directory import home_building, normalize_email, resolve_staff
from .types import BatchResult


logger = logging.getLogger(__name__)

_HONORIFIC = re.compile(r"^(Mr\.|Ms\.|Mrs\.|Miss\b|Dr\.)\s*", re.IGNORECASE)


def clean_subbed_for(name: Optional[str]) -> str:
    """'Mrs. Smith' -> 'Smith'."""
    if not name:
        return ""
    return _HONORIFIC.sub("", name.strip()).strip()


def _resolve_requester(db: Session, email: str, name: Optional[str], building: Optional[str]) -> tuple[str, str]:
    """Display name and building for a requester, filled in from the directory."""
    member = resolve_staff(db, email)

    if building:
        building = normalize_building_code(building)
        if not building_exists(building):
            raise ValidationFailure(f"Unknown building '{building}'")
    elif member is not None:
        building = home_building(member)
    else:
        building = settings.DEFAULT_BUILDING

    if not name:
        name = member.name if member is not None and member.name else email
    return name, building


def _prepare_earned(db: Session, payload: EarnedRequestCreate) -> dict:
    """Validated column values for an earned request. Writes nothing."""
    email = normalize_email(payload.email)
    if not email:
        raise ValidationFailure("Email is required")
    if payload.date is None:
        raise ValidationFailure("Date is required")
    if not payload.period or not payload.period.strip():
        raise ValidationFailure("Period is required")

    hours = payload.hours
    if hours is None:
        hours = calculate_periods(payload.period, payload.duration_type)
    hours = Decimal(str(hours))
    if hours <= 0:
        raise ValidationFailure("Hours must be positive")

    name, building = _resolve_requester(db, email, payload.name, payload.building)
    return {
        "email": email,
        "name": name,
        "subbed_for": clean_subbed_for(payload.subbed_for),
        "other_details": payload.other_details,
        "date": payload.date,
        "period": payload.period.strip(),
        "duration_type": payload.duration_type or "",
        "hours": hours,
        "building": building,
        "status": EarnedStatus.PENDING,
    }


def _insert_earned(db: Session, values: dict, other_flag: str = "") -> EarnedRequests:
    """Ledger row plus archive copy, flushed but not committed."""
    request = RowStore(db, EarnedRequests).append_row(**values)
    archive_submission(db, request, other_flag=other_flag)
    return request


def _other_flag(payload: EarnedRequestCreate) -> str:
    return "Other" if payload.subbed_for_type == "Other" else ""


def _prepare_usage(db: Session, payload: UsedRequestCreate) -> dict:
    email = normalize_email(payload.email)
    if not email:
        raise ValidationFailure("Email is required")
    if payload.date is None:
        raise ValidationFailure("Date is required")
    amount = Decimal(str(payload.amount)) if payload.amount is not None else None
    if amount is None or amount <= 0:
        raise ValidationFailure("Amount must be positive")

    name, building = _resolve_requester(db, email, payload.name, payload.building)
    return {
        "email": email,
        "name": name,
        "date": payload.date,
        "amount": amount,
        "note": payload.note or None,
        "building": building,
        "status": UsedStatus.PENDING,
    }


def _insert_usage(db: Session, values: dict) -> UsedRequests:
    return RowStore(db, UsedRequests).append_row(**values)


def record_earned(db: Session, payload: EarnedRequestCreate) -> EarnedRequests:
    values = _prepare_earned(db, payload)
    with transaction(db):
        request = _insert_earned(db, values, _other_flag(payload))

    logger.info("Earned request %s recorded for %s (%s, %s hrs)", request.id, request.email, request.building, request.hours)
    return request


def record_usage(db: Session, payload: UsedRequestCreate) -> UsedRequests:
    values = _prepare_usage(db, payload)
    with transaction(db):
        request = _insert_usage(db, values)

    logger.info("Used request %s recorded for %s (%s, %s hrs)", request.id, request.email, request.building, request.amount)
    return request


def admin_submit_request(db: Session, payload: AdminSubmission) -> dict:
    """
    One admin entry covering both sides of a swap: the earner gets an earned
    request, the covered staff member a usage request. Either side is skipped
    when it is not a staff member. Both sides are validated before anything
    is written, and written together or not at all.
    """
    details = payload.details
    earned_payload = None
    used_payload = None

    if payload.earner.type == "Staff" and payload.earner.email:
        earned_payload = EarnedRequestCreate(
            email=payload.earner.email,
            subbed_for=payload.user.name,
            subbed_for_type=payload.user.type,
            date=details.date,
            period=details.period,
            duration_type=details.amount_type,
            hours=details.amount,
            building=details.building,
        )

    if payload.user.type == "Staff" and payload.user.email:
        used_payload = UsedRequestCreate(
            email=payload.user.email,
            name=payload.user.name,
            date=details.date,
            amount=details.amount,
            building=details.building,
        )

    earned_values = _prepare_earned(db, earned_payload) if earned_payload else None
    used_values = _prepare_usage(db, used_payload) if used_payload else None

    created: dict = {"earned": None, "used": None}
    with transaction(db):
        if earned_values is not None:
            created["earned"] = _insert_earned(db, earned_values, _other_flag(earned_payload))
        if used_values is not None:
            created["used"] = _insert_usage(db, used_values)

    logger.info(
        "Admin submission recorded: earned %s, used %s",
        created["earned"].id if created["earned"] else None,
        created["used"].id if created["used"] else None,
    )
    return created


def process_submission_queue(db: Session, items: list[QueuedSubmission]) -> BatchResult:
    """Record a queue of mixed submissions; a bad item is logged and skipped."""
    result = BatchResult()
    for index, item in enumerate(items):
        try:
            if item.type == "earned":
                record_earned(db, EarnedRequestCreate.model_validate(item.payload))
            elif item.type == "used":
                record_usage(db, UsedRequestCreate.model_validate(item.payload))
            else:
                raise ValidationFailure(f"Unknown submission type '{item.type}'")
            result.succeeded += 1
        except Exception as e:
            logger.exception("Error processing queued submission %d", index)
            result.failed += 1
            result.errors[index] = str(e)
    return result
