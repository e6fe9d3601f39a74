from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from timebank.api.deps import get_building_scope, get_current_staff, get_db, get_notifier, require_admin
from timebank.schemas.staff import (
    BalanceResponse,
    CarryOverUpdate,
    HistoryEntryResponse,
    StaffResponse,
    StatusReportRequest,
    StatusReportResponse,
)
from timebank.services.ledger import (
    ensure_can_act,
    list_staff,
    require_staff,
    send_status_reports,
    set_carry_over,
    staff_balances,
    staff_history,
)
from timebank.services.ledger.directory import home_building, normalize_email
from timebank.services.ledger.notifications import Notifier
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=List[StaffResponse])
def get_staff(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return list_staff(db, building)


@router.get("/balances", response_model=List[BalanceResponse])
def get_balances(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    """Carry-over plus approved earned minus approved used, per staff member"""
    return [
        BalanceResponse(
            email=b.email,
            name=b.name,
            role=b.role,
            carry_over=b.carry_over,
            earned=b.earned,
            used=b.used,
            balance=b.balance,
        )
        for b in staff_balances(db, building)
    ]


@router.get("/{email}/history", response_model=List[HistoryEntryResponse])
def get_history(
    email: str,
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    """Own history for anyone; other people's history for admins"""
    email = normalize_email(email)
    if email != current_staff.email:
        if not current_staff.is_admin:
            raise HTTPException(status_code=403, detail="No access to this history")
        return staff_history(db, email, building)
    return staff_history(db, email)


@router.put("/{email}/carry-over", response_model=StaffResponse)
def update_carry_over(
    email: str,
    payload: CarryOverUpdate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(require_admin),
):
    ensure_can_act(current_staff, home_building(require_staff(db, email)))
    return set_carry_over(db, email, payload.hours)


@router.post("/status-reports", response_model=StatusReportResponse)
def post_status_reports(
    payload: StatusReportRequest,
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
    notifier: Notifier = Depends(get_notifier),
):
    return send_status_reports(db, payload.emails, notifier)
