"""
Internal data types for the ledger services.
Decoupled from SQLAlchemy models so balance and history logic stays plain.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from timebank.db.models.staff_members import StaffRole


ZERO = Decimal("0")


@dataclass
class StaffMember:
    email: str
    name: str
    role: StaffRole
    buildings: list[str] = field(default_factory=list)
    carry_over: Decimal = ZERO

    @property
    def primary_building(self) -> Optional[str]:
        return self.buildings[0] if self.buildings else None

    @property
    def is_super_admin(self) -> bool:
        return self.role == StaffRole.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role in (StaffRole.ADMIN, StaffRole.SUPER_ADMIN)


@dataclass
class BalanceTotals:
    earned: Decimal = ZERO
    used: Decimal = ZERO


@dataclass
class StaffBalance:
    email: str
    name: str
    role: StaffRole
    carry_over: Decimal
    earned: Decimal
    used: Decimal

    @property
    def balance(self) -> Decimal:
        return self.carry_over + self.earned - self.used


@dataclass
class PendingSummary:
    """Just enough of a pending earned request to flag it on the schedule grid."""
    request_id: int
    date: date
    subbed_for: str
    period: str


@dataclass
class HistoryEntry:
    request_id: int
    sheet_type: str  # "earned" | "used"
    entry_type: str  # "Earned" | "Used" | "Pending" | "Denied"
    date: date
    amount: Decimal
    period: str = "N/A"
    subbed_for: str = "N/A"
    amount_type: str = "N/A"
    denial_reason: str = ""
    position: Optional[int] = None


@dataclass
class BatchResult:
    succeeded: int = 0
    failed: int = 0
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed
