from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timebank.api.deps import check_row_access, get_building_scope, get_current_staff, get_db, require_admin
from timebank.db.models.used_requests import UsedRequests, UsedStatus
from timebank.schemas.batch import BatchRequest, BatchResultResponse
from timebank.schemas.used_requests import UsedRequestCreate, UsedRequestResponse, UsedRequestUpdate
from timebank.services.ledger import (
    approve_used,
    batch_approve_used,
    batch_delete_used,
    delete_used,
    edit_used,
    list_pending_used,
    record_usage,
    revert_used,
)
from timebank.services.ledger.state_machine import get_used
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/used-requests", tags=["used-requests"])


@router.get("", response_model=List[UsedRequestResponse])
def list_used_requests(
    request_status: Optional[UsedStatus] = None,
    skip: int = 0,
    limit: int = 100,
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    stmt = select(UsedRequests)
    if not current_staff.is_admin:
        stmt = stmt.where(UsedRequests.email == current_staff.email)
    elif building:
        stmt = stmt.where(UsedRequests.building == building)

    if request_status:
        stmt = stmt.where(UsedRequests.status == request_status)

    stmt = stmt.order_by(UsedRequests.date.desc(), UsedRequests.id.desc()).offset(skip).limit(limit)
    return db.execute(stmt).scalars().all()


@router.post("", response_model=UsedRequestResponse, status_code=status.HTTP_201_CREATED)
def create_used_request(
    payload: UsedRequestCreate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    if not payload.email:
        payload.email = current_staff.email
    elif payload.email.strip().lower() != current_staff.email and not current_staff.is_admin:
        raise HTTPException(status_code=403, detail="Can only submit requests for yourself")

    return record_usage(db, payload)


@router.get("/pending", response_model=List[UsedRequestResponse])
def list_pending(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return list_pending_used(db, building)


@router.patch("/{request_id}/approve", response_model=UsedRequestResponse)
def approve(
    request_id: int,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_used(db, request_id).building)
    return approve_used(db, request_id)


@router.patch("/{request_id}/revert", response_model=UsedRequestResponse)
def revert(
    request_id: int,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_used(db, request_id).building)
    return revert_used(db, request_id)


@router.put("/{request_id}", response_model=UsedRequestResponse)
def update_used_request(
    request_id: int,
    payload: UsedRequestUpdate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_used(db, request_id).building)
    return edit_used(db, request_id, payload.model_dump(exclude_unset=True))


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_used_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    check_row_access(current_staff, get_used(db, request_id).building)
    delete_used(db, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/batch/approve", response_model=BatchResultResponse)
def batch_approve(
    payload: BatchRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    return BatchResultResponse.from_result(batch_approve_used(db, payload.ids, actor=current_staff))


@router.post("/batch/delete", response_model=BatchResultResponse)
def batch_delete(
    payload: BatchRequest,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    return BatchResultResponse.from_result(batch_delete_used(db, payload.ids, actor=current_staff))
