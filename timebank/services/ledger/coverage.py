"""
Coverage requests: an admin asks a teacher to cover a period.
Accepting files a pending earned request on the teacher's behalf.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from timebank.db.models.earned_requests import EarnedRequests
from timebank.schemas.coverage import CoverageRequest
from timebank.schemas.earned_requests import EarnedRequestCreate

from .notifications import NotificationKind, Notifier, send_notification
from .submissions import record_earned


logger = logging.getLogger(__name__)


def _details(request: CoverageRequest) -> dict:
    return {
        "teacher_name": request.teacher_name,
        "teacher_email": request.teacher_email,
        "subbed_for": request.subbed_for,
        "date": request.date.isoformat(),
        "period": request.period,
        "amount": str(request.amount),
        "amount_type": request.amount_type,
        "admin_email": request.admin_email,
    }


def request_coverage(request: CoverageRequest, notifier: Optional[Notifier] = None) -> bool:
    """Ask the teacher and send the admin a tracking copy."""
    details = _details(request)
    sent = send_notification(notifier, request.teacher_email, NotificationKind.COVERAGE_REQUEST, details)
    send_notification(notifier, request.admin_email, NotificationKind.COVERAGE_REQUESTED, details)
    logger.info("Coverage requested from %s for %s %s", request.teacher_email, request.date, request.period)
    return sent


def accept_coverage(
    db: Session,
    request: CoverageRequest,
    notifier: Optional[Notifier] = None,
) -> EarnedRequests:
    earned = record_earned(db, EarnedRequestCreate(
        email=request.teacher_email,
        subbed_for=request.subbed_for,
        subbed_for_type="Staff",
        date=request.date,
        period=request.period,
        duration_type=request.amount_type,
        hours=request.amount,
    ))
    send_notification(notifier, request.admin_email, NotificationKind.COVERAGE_ACCEPTED, _details(request))
    return earned


def decline_coverage(request: CoverageRequest, notifier: Optional[Notifier] = None) -> bool:
    logger.info("Coverage declined by %s for %s", request.teacher_email, request.period)
    return send_notification(notifier, request.admin_email, NotificationKind.COVERAGE_DECLINED, _details(request))
