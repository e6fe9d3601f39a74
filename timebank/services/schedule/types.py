"""
Internal data types for the availability schedule.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from timebank.services.ledger.types import ZERO, PendingSummary


@dataclass
class ScheduleSlot:
    month: str
    days: str  # "Mon,Wed"
    period: str
    name: str
    email: str
    hours: Decimal = ZERO
    pending_requests: list[PendingSummary] = field(default_factory=list)


@dataclass
class AvailabilityEntry:
    days: str
    period: str
