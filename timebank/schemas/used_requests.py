from pydantic import BaseModel
import datetime as dt
from decimal import Decimal
from typing import Optional
from timebank.db.models.used_requests import UsedStatus


class UsedRequestCreate(BaseModel):
    email: str = ""
    name: Optional[str] = None
    date: Optional[dt.date] = None
    amount: Optional[Decimal] = None
    note: Optional[str] = None
    building: Optional[str] = None


class UsedRequestUpdate(BaseModel):
    date: Optional[dt.date] = None
    amount: Optional[Decimal] = None
    note: Optional[str] = None


class UsedRequestResponse(BaseModel):
    id: int
    email: str
    name: str
    date: dt.date
    amount: Decimal
    note: Optional[str]
    building: str
    status: UsedStatus
    approved_at: Optional[dt.datetime]

    class Config:
        from_attributes = True
