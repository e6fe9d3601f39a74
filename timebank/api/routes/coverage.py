from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timebank.api.deps import get_current_staff, get_db, get_notifier, require_admin
from timebank.schemas.coverage import CoverageRequest
from timebank.schemas.earned_requests import EarnedRequestResponse
from timebank.services.ledger.coverage import accept_coverage, decline_coverage, request_coverage
from timebank.services.ledger.notifications import Notifier
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/coverage", tags=["coverage"])


def _check_teacher(current_staff: StaffMember, request: CoverageRequest) -> None:
    if request.teacher_email.strip().lower() != current_staff.email and not current_staff.is_admin:
        raise HTTPException(status_code=403, detail="Coverage request is addressed to someone else")


@router.post("/requests", status_code=status.HTTP_202_ACCEPTED)
def post_coverage_request(
    payload: CoverageRequest,
    current_staff: StaffMember = Depends(require_admin),
    notifier: Notifier = Depends(get_notifier),
):
    if not payload.admin_email:
        payload.admin_email = current_staff.email
    return {"sent": request_coverage(payload, notifier)}


@router.post("/accept", response_model=EarnedRequestResponse, status_code=status.HTTP_201_CREATED)
def post_accept(
    payload: CoverageRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
    notifier: Notifier = Depends(get_notifier),
):
    _check_teacher(current_staff, payload)
    return accept_coverage(db, payload, notifier)


@router.post("/decline")
def post_decline(
    payload: CoverageRequest,
    current_staff: StaffMember = Depends(get_current_staff),
    notifier: Notifier = Depends(get_notifier),
):
    _check_teacher(current_staff, payload)
    return {"sent": decline_coverage(payload, notifier)}
