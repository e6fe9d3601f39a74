from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timebank.api.deps import check_row_access, get_building_scope, get_current_staff, get_db, get_notifier, require_admin
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.schemas.batch import BatchRequest, BatchResultResponse
from timebank.schemas.earned_requests import (
    ApproveRequest,
    DenyRequest,
    EarnedRequestCreate,
    EarnedRequestResponse,
    EarnedRequestUpdate,
)
from timebank.services.ledger import (
    approve_earned,
    batch_approve_earned,
    batch_delete_earned,
    batch_deny_earned,
    delete_earned,
    deny_earned,
    edit_earned,
    list_pending_earned,
    record_earned,
    revert_earned,
)
from timebank.services.ledger.notifications import Notifier
from timebank.services.ledger.state_machine import get_earned
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/earned-requests", tags=["earned-requests"])


@router.get("", response_model=List[EarnedRequestResponse])
def list_earned_requests(
    request_status: Optional[EarnedStatus] = None,
    skip: int = 0,
    limit: int = 100,
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    """Admins see their building's requests, everyone else only their own"""
    stmt = select(EarnedRequests)
    if not current_staff.is_admin:
        stmt = stmt.where(EarnedRequests.email == current_staff.email)
    elif building:
        stmt = stmt.where(EarnedRequests.building == building)

    if request_status:
        stmt = stmt.where(EarnedRequests.status == request_status)

    stmt = stmt.order_by(EarnedRequests.date.desc(), EarnedRequests.id.desc()).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


@router.post("", response_model=EarnedRequestResponse, status_code=status.HTTP_201_CREATED)
def create_earned_request(
    payload: EarnedRequestCreate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    """Staff submit coverage they did; admins may submit for anyone"""
    if not payload.email:
        payload.email = current_staff.email
    elif payload.email.strip().lower() != current_staff.email and not current_staff.is_admin:
        raise HTTPException(status_code=403, detail="Can only submit requests for yourself")

    return record_earned(db, payload)


@router.get("/pending", response_model=List[EarnedRequestResponse])
def list_pending(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return list_pending_earned(db, building)


@router.patch("/{request_id}/approve", response_model=EarnedRequestResponse)
def approve(
    request_id: int,
    payload: Optional[ApproveRequest] = None,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
    notifier: Notifier = Depends(get_notifier),
):
    check_row_access(current_staff, get_earned(db, request_id).building)
    notify = payload.notify if payload else False
    return approve_earned(db, request_id, notify=notify, notifier=notifier)


@router.patch("/{request_id}/deny", response_model=EarnedRequestResponse)
def deny(
    request_id: int,
    payload: DenyRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
    notifier: Notifier = Depends(get_notifier),
):
    check_row_access(current_staff, get_earned(db, request_id).building)
    return deny_earned(
        db,
        request_id,
        reasons=payload.reasons,
        note=payload.note,
        notify=payload.notify,
        notifier=notifier,
    )


@router.patch("/{request_id}/revert", response_model=EarnedRequestResponse)
def revert(
    request_id: int,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_earned(db, request_id).building)
    return revert_earned(db, request_id)


@router.put("/{request_id}", response_model=EarnedRequestResponse)
def update_earned_request(
    request_id: int,
    payload: EarnedRequestUpdate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_earned(db, request_id).building)
    return edit_earned(db, request_id, payload.model_dump(exclude_unset=True))


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_earned_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_earned(db, request_id).building)
    delete_earned(db, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== Batch ====================

@router.post("/batch/approve", response_model=BatchResultResponse)
def batch_approve(
    payload: BatchRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    return BatchResultResponse.from_result(batch_approve_earned(db, payload.ids, actor=current_staff))


@router.post("/batch/deny", response_model=BatchResultResponse)
def batch_deny(
    payload: BatchRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    result = batch_deny_earned(db, payload.ids, reasons=payload.reasons, note=payload.note, actor=current_staff)
    return BatchResultResponse.from_result(result)


@router.post("/batch/delete", response_model=BatchResultResponse)
def batch_delete(
    payload: BatchRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    return BatchResultResponse.from_result(batch_delete_earned(db, payload.ids, actor=current_staff))
