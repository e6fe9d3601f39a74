from pydantic import BaseModel
import datetime as dt
from decimal import Decimal
from typing import Optional
from timebank.db.models.staff_members import StaffRole


class StaffResponse(BaseModel):
    email: str
    name: str
    role: StaffRole
    buildings: list[str]
    carry_over: Decimal

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    email: str
    name: str
    role: StaffRole
    carry_over: Decimal
    earned: Decimal
    used: Decimal
    balance: Decimal

    class Config:
        from_attributes = True


class HistoryEntryResponse(BaseModel):
    request_id: int
    sheet_type: str
    entry_type: str
    date: dt.date
    amount: Decimal
    period: str
    subbed_for: str
    amount_type: str
    denial_reason: str
    position: Optional[int]

    class Config:
        from_attributes = True


class CarryOverUpdate(BaseModel):
    hours: Decimal


class StatusReportRequest(BaseModel):
    emails: list[str]


class StatusReportResponse(BaseModel):
    success: int
    failed: int
