from pydantic import BaseModel
import datetime as dt
from decimal import Decimal
from typing import Optional
from timebank.db.models.earned_requests import EarnedStatus


class EarnedRequestCreate(BaseModel):
    email: str = ""
    name: Optional[str] = None
    subbed_for: Optional[str] = None
    subbed_for_type: str = "Staff"  # "Staff" | "Other"
    other_details: Optional[str] = None
    date: Optional[dt.date] = None
    period: str = ""
    duration_type: Optional[str] = None
    hours: Optional[Decimal] = None
    building: Optional[str] = None


class EarnedRequestUpdate(BaseModel):
    subbed_for: Optional[str] = None
    date: Optional[dt.date] = None
    period: Optional[str] = None
    duration_type: Optional[str] = None
    hours: Optional[Decimal] = None


class EarnedRequestResponse(BaseModel):
    id: int
    email: str
    name: str
    subbed_for: str
    other_details: Optional[str]
    date: dt.date
    period: str
    duration_type: str
    hours: Decimal
    building: str
    status: EarnedStatus
    approved_at: Optional[dt.datetime]
    denied_at: Optional[dt.datetime]
    denial_reason: Optional[str]

    class Config:
        from_attributes = True


class ApproveRequest(BaseModel):
    notify: bool = False


class DenyRequest(BaseModel):
    reasons: list[str] = []
    note: Optional[str] = None
    notify: bool = False
