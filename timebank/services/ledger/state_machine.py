"""
Approval state machine for the earned and used ledgers.

Earned:  PENDING -> APPROVED | DENIED,  APPROVED | DENIED -> PENDING,  any -> deleted
Used:    PENDING -> APPROVED,  APPROVED -> PENDING,  any -> deleted

There is no direct APPROVED <-> DENIED edge; an admin reverts to PENDING
first so each decision keeps its own timestamp. Balances are recomputed
from status on read, so none of these operations touch a balance.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from timebank.core.errors import InvalidTransition, ValidationFailure
from timebank.db.database import transaction
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.models.used_requests import UsedRequests, UsedStatus
from timebank.db.row_store import RowStore

from .archive import locate_archive_or_log, sync_archive
from .notifications import NotificationKind, Notifier, send_notification


logger = logging.getLogger(__name__)

EARNED_EDITABLE_FIELDS = ("subbed_for", "date", "period", "duration_type", "hours")
USED_EDITABLE_FIELDS = ("date", "amount", "note")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _earned(db: Session) -> RowStore:
    return RowStore(db, EarnedRequests)


def _used(db: Session) -> RowStore:
    return RowStore(db, UsedRequests)


def get_earned(db: Session, request_id: int) -> EarnedRequests:
    return _earned(db).get(request_id)


def get_used(db: Session, request_id: int) -> UsedRequests:
    return _used(db).get(request_id)


def build_denial_reason(reasons: Iterable[str] = (), note: Optional[str] = None) -> str:
    """'reason a, reason b. note' (either part may be missing)."""
    text = ", ".join(r.strip() for r in reasons if r and r.strip())
    if note and note.strip():
        if text:
            text += ". "
        text += note.strip()
    return text


def _clean_changes(changes: dict, editable: tuple, required: tuple) -> dict:
    """
    Drop fields left out (None), strip text and reject blanks where the
    field cannot be empty.
    """
    unknown = set(changes) - set(editable)
    if unknown:
        raise ValidationFailure(f"Fields not editable: {', '.join(sorted(unknown))}")

    updates = {}
    for key, value in changes.items():
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value and key in required:
                raise ValidationFailure(f"{key.replace('_', ' ').capitalize()} cannot be blank")
        updates[key] = value
    return updates


def _request_details(request: EarnedRequests) -> dict:
    return {
        "request_id": request.id,
        "name": request.name,
        "subbed_for": request.subbed_for,
        "date": request.date.isoformat(),
        "period": request.period,
        "hours": str(request.hours),
    }


# ==================== Earned ====================

def approve_earned(
    db: Session,
    request_id: int,
    notify: bool = False,
    notifier: Optional[Notifier] = None,
) -> EarnedRequests:
    """
    Mark an earned request APPROVED.

    Approving an already approved request only re-stamps approved_at.
    Denied requests must be reverted first.
    """
    with transaction(db):
        request = get_earned(db, request_id)
        if request.status == EarnedStatus.DENIED:
            raise InvalidTransition(f"Earned request {request_id} is denied; revert it to pending before approving")
        _earned(db).update_row(
            request,
            status=EarnedStatus.APPROVED,
            approved_at=_now(),
            denied_at=None,
            denial_reason=None,
        )
    logger.info("Earned request %s approved (%s, %s hrs)", request.id, request.email, request.hours)

    if notify:
        send_notification(notifier, request.email, NotificationKind.EARNED_APPROVED, _request_details(request))
    return request


def deny_earned(
    db: Session,
    request_id: int,
    reasons: Iterable[str] = (),
    note: Optional[str] = None,
    notify: bool = False,
    notifier: Optional[Notifier] = None,
) -> EarnedRequests:
    reasons = list(reasons or [])
    with transaction(db):
        request = get_earned(db, request_id)
        if request.status == EarnedStatus.APPROVED:
            raise InvalidTransition(f"Earned request {request_id} is approved; revert it to pending before denying")
        _earned(db).update_row(
            request,
            status=EarnedStatus.DENIED,
            approved_at=None,
            denied_at=_now(),
            denial_reason=build_denial_reason(reasons, note),
        )
    logger.info("Earned request %s denied (%s)", request.id, request.email)

    if notify:
        payload = _request_details(request)
        payload.update({"reasons": reasons, "note": note or ""})
        send_notification(notifier, request.email, NotificationKind.EARNED_DENIED, payload)
    return request


def revert_earned(db: Session, request_id: int) -> EarnedRequests:
    """Back to PENDING with every decision field cleared. Safe to repeat."""
    with transaction(db):
        request = get_earned(db, request_id)
        previous = request.status
        _earned(db).update_row(
            request,
            status=EarnedStatus.PENDING,
            approved_at=None,
            denied_at=None,
            denial_reason=None,
        )
    logger.info("Earned request %s reverted to pending (was %s)", request.id, previous.value)
    return request


def delete_earned(db: Session, request_id: int) -> None:
    """
    Remove an earned request and its archive copy.
    The archive lookup needs the row's current values, so the ledger row goes last.
    """
    with transaction(db):
        request = get_earned(db, request_id)
        record = locate_archive_or_log(db, request, "delete")
        if record is not None:
            db.delete(record)
            db.flush()
        _earned(db).delete(request)
    logger.info("Earned request %s deleted", request_id)


def edit_earned(db: Session, request_id: int, changes: dict) -> EarnedRequests:
    """
    Overwrite the editable fields of an earned request and its archive copy.
    The archive row is located with the values from before the edit.
    """
    updates = _clean_changes(changes, EARNED_EDITABLE_FIELDS, required=("period",))
    if "hours" in updates:
        updates["hours"] = Decimal(str(updates["hours"]))
        if updates["hours"] <= 0:
            raise ValidationFailure("Hours must be positive")

    with transaction(db):
        request = get_earned(db, request_id)
        record = locate_archive_or_log(db, request, "edit")
        if record is not None:
            sync_archive(record, updates)
        _earned(db).update_row(request, **updates)
    logger.info("Earned request %s edited: %s", request_id, sorted(updates))
    return request


# ==================== Used ====================

def approve_used(db: Session, request_id: int) -> UsedRequests:
    with transaction(db):
        request = get_used(db, request_id)
        _used(db).update_row(request, status=UsedStatus.APPROVED, approved_at=_now())
    logger.info("Used request %s approved (%s, %s hrs)", request.id, request.email, request.amount)
    return request


def revert_used(db: Session, request_id: int) -> UsedRequests:
    with transaction(db):
        request = get_used(db, request_id)
        _used(db).update_row(request, status=UsedStatus.PENDING, approved_at=None)
    logger.info("Used request %s reverted to pending", request.id)
    return request


def delete_used(db: Session, request_id: int) -> None:
    with transaction(db):
        _used(db).delete(get_used(db, request_id))
    logger.info("Used request %s deleted", request_id)


def edit_used(db: Session, request_id: int, changes: dict) -> UsedRequests:
    updates = _clean_changes(changes, USED_EDITABLE_FIELDS, required=())
    if updates.get("note") == "":
        updates["note"] = None
    if "amount" in updates:
        updates["amount"] = Decimal(str(updates["amount"]))
        if updates["amount"] <= 0:
            raise ValidationFailure("Amount must be positive")

    with transaction(db):
        request = get_used(db, request_id)
        _used(db).update_row(request, **updates)
    logger.info("Used request %s edited: %s", request_id, sorted(updates))
    return request
