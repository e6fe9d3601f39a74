from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timebank.api.deps import get_db, require_admin
from timebank.core.buildings import normalize_building_code
from timebank.schemas.batch import BatchResultResponse
from timebank.schemas.submissions import AdminSubmission, AdminSubmissionResponse, QueuedSubmission
from timebank.services.ledger import admin_submit_request, ensure_can_act, process_submission_queue
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("/admin", response_model=AdminSubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_for_staff(
    payload: AdminSubmission,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    """Record both sides of a coverage swap in one call"""
    if payload.details.building:
        ensure_can_act(current_staff, normalize_building_code(payload.details.building))
    return admin_submit_request(db, payload)


@router.post("/queue", response_model=BatchResultResponse)
def submit_queue(
    items: List[QueuedSubmission],
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return BatchResultResponse.from_result(process_submission_queue(db, items))
