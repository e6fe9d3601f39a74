from pydantic import BaseModel
import datetime as dt
from decimal import Decimal


class PendingSummaryResponse(BaseModel):
    request_id: int
    date: dt.date
    subbed_for: str
    period: str

    class Config:
        from_attributes = True


class ScheduleSlotResponse(BaseModel):
    month: str
    days: str
    period: str
    name: str
    email: str
    hours: Decimal
    pending_requests: list[PendingSummaryResponse] = []

    class Config:
        from_attributes = True


class SchedulePeriodUpdate(BaseModel):
    period: str
    day_assignments: dict[str, list[str]]  # {"Mon": ["a@x.org"], ...}


class AvailabilityEntryIn(BaseModel):
    days: str
    period: str


class AvailabilityUpdate(BaseModel):
    entries: list[AvailabilityEntryIn]
