from typing import Dict, List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timebank.api.deps import get_building_scope, get_current_staff, get_db, require_admin
from timebank.schemas.schedule import AvailabilityUpdate, SchedulePeriodUpdate, ScheduleSlotResponse
from timebank.services.ledger.types import StaffMember
from timebank.services.schedule import (
    AvailabilityEntry,
    read_schedule,
    save_teacher_availability,
    write_schedule_period,
)

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=Dict[str, List[ScheduleSlotResponse]])
def get_schedule(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(get_current_staff),
):
    """Availability by school month, with approved hours and pending requests"""
    return read_schedule(db, building)


@router.put("/{month}/periods", response_model=List[ScheduleSlotResponse])
def put_schedule_period(
    month: str,
    payload: SchedulePeriodUpdate,
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return write_schedule_period(db, month, payload.period, payload.day_assignments)


@router.put("/{month}/mine", response_model=List[ScheduleSlotResponse])
def put_my_availability(
    month: str,
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    entries = [AvailabilityEntry(days=e.days, period=e.period) for e in payload.entries]
    return save_teacher_availability(db, current_staff.email, month, entries)
