"""
Balance calculator.

Balances are never stored. Every call rescans both ledgers and counts only
rows currently APPROVED, so reverting or deleting a row is reflected on the
next read without any compensating arithmetic.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from timebank.core.buildings import normalize_building_code
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.models.used_requests import UsedRequests, UsedStatus

from .directory import list_staff, normalize_email, require_staff
from .types import ZERO, BalanceTotals, StaffBalance


def compute_balances(db: Session, building: Optional[str] = None) -> dict[str, BalanceTotals]:
    """email -> approved earned/used totals, optionally for one building."""
    building = normalize_building_code(building)
    totals: dict[str, BalanceTotals] = {}

    earned_stmt = select(EarnedRequests.email, EarnedRequests.hours).where(
        EarnedRequests.status == EarnedStatus.APPROVED
    )
    used_stmt = select(UsedRequests.email, UsedRequests.amount).where(
        UsedRequests.status == UsedStatus.APPROVED
    )
    if building:
        earned_stmt = earned_stmt.where(EarnedRequests.building == building)
        used_stmt = used_stmt.where(UsedRequests.building == building)

    for email, hours in db.execute(earned_stmt).all():
        entry = totals.setdefault(normalize_email(email), BalanceTotals())
        entry.earned += Decimal(hours or 0)

    for email, amount in db.execute(used_stmt).all():
        entry = totals.setdefault(normalize_email(email), BalanceTotals())
        entry.used += Decimal(amount or 0)

    return totals


def staff_balances(db: Session, building: Optional[str] = None) -> list[StaffBalance]:
    """Directory joined with ledger totals, one entry per staff member in scope."""
    totals = compute_balances(db, building)
    result = []
    for member in list_staff(db, building):
        entry = totals.get(member.email, BalanceTotals())
        result.append(StaffBalance(
            email=member.email,
            name=member.name,
            role=member.role,
            carry_over=member.carry_over,
            earned=entry.earned,
            used=entry.used,
        ))
    return result


def balance_for(db: Session, email: str, building: Optional[str] = None) -> StaffBalance:
    member = require_staff(db, email)
    entry = compute_balances(db, building).get(member.email, BalanceTotals(ZERO, ZERO))
    return StaffBalance(
        email=member.email,
        name=member.name,
        role=member.role,
        carry_over=member.carry_over,
        earned=entry.earned,
        used=entry.used,
    )
