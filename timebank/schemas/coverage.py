from pydantic import BaseModel
import datetime as dt
from decimal import Decimal
from typing import Optional


class CoverageRequest(BaseModel):
    teacher_email: str
    teacher_name: Optional[str] = None
    subbed_for: str
    date: dt.date
    period: str
    amount: Decimal = Decimal("1")
    amount_type: str = "Full Period"
    admin_email: str = ""
