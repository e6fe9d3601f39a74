from pydantic import BaseModel
import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from timebank.schemas.earned_requests import EarnedRequestResponse
from timebank.schemas.used_requests import UsedRequestResponse


class Party(BaseModel):
    type: str = "Staff"  # "Staff" | "Other"
    email: Optional[str] = None
    name: Optional[str] = None


class SubmissionDetails(BaseModel):
    date: dt.date
    period: str
    amount_type: Optional[str] = None
    amount: Optional[Decimal] = None
    building: Optional[str] = None


class AdminSubmission(BaseModel):
    """One swap entered by an admin: who covered (earner) and who was covered (user)."""
    earner: Party
    user: Party
    details: SubmissionDetails


class AdminSubmissionResponse(BaseModel):
    earned: Optional[EarnedRequestResponse] = None
    used: Optional[UsedRequestResponse] = None


class QueuedSubmission(BaseModel):
    type: str  # "earned" | "used"
    payload: dict[str, Any]
