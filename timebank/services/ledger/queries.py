"""
Read-side queries for the admin and teacher views: pending lists, badge
counts, per-staff history and the caller's initial context.
"""

from dataclasses import asdict
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebank.core.buildings import get_building_config, normalize_building_code, BUILDING_CONFIG
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.models.used_requests import UsedRequests, UsedStatus
from timebank.db.row_store import FIRST_DATA_POSITION

from .directory import guest, home_building, normalize_email, resolve_staff
from .types import HistoryEntry


def list_pending_earned(db: Session, building: Optional[str] = None) -> list[EarnedRequests]:
    stmt = select(EarnedRequests).where(EarnedRequests.status == EarnedStatus.PENDING)
    building = normalize_building_code(building)
    if building:
        stmt = stmt.where(EarnedRequests.building == building)
    return list(db.execute(stmt.order_by(EarnedRequests.id)).scalars().all())


def list_pending_used(db: Session, building: Optional[str] = None) -> list[UsedRequests]:
    stmt = select(UsedRequests).where(UsedRequests.status == UsedStatus.PENDING)
    building = normalize_building_code(building)
    if building:
        stmt = stmt.where(UsedRequests.building == building)
    return list(db.execute(stmt.order_by(UsedRequests.id)).scalars().all())


def dashboard_counts(db: Session, building: Optional[str] = None) -> dict[str, int]:
    """Pending badge counts for the admin dashboard."""
    building = normalize_building_code(building)

    earned_stmt = select(func.count(EarnedRequests.id)).where(EarnedRequests.status == EarnedStatus.PENDING)
    used_stmt = select(func.count(UsedRequests.id)).where(UsedRequests.status == UsedStatus.PENDING)
    if building:
        earned_stmt = earned_stmt.where(EarnedRequests.building == building)
        used_stmt = used_stmt.where(UsedRequests.building == building)

    return {
        "earned": db.execute(earned_stmt).scalar_one(),
        "used": db.execute(used_stmt).scalar_one(),
    }


def _positions(db: Session, model) -> dict[int, int]:
    ids = db.execute(select(model.id).order_by(model.id)).scalars().all()
    return {row_id: i + FIRST_DATA_POSITION for i, row_id in enumerate(ids)}


def staff_history(db: Session, email: str, building: Optional[str] = None) -> list[HistoryEntry]:
    """
    Every earned row (pending, approved, denied) and every used row
    (pending, approved) for one person, newest first, with the ids an admin
    needs to act on them.
    """
    email = normalize_email(email)
    building = normalize_building_code(building)

    earned_stmt = select(EarnedRequests).where(EarnedRequests.email == email)
    used_stmt = select(UsedRequests).where(UsedRequests.email == email)
    if building:
        earned_stmt = earned_stmt.where(EarnedRequests.building == building)
        used_stmt = used_stmt.where(UsedRequests.building == building)

    earned_positions = _positions(db, EarnedRequests)
    used_positions = _positions(db, UsedRequests)

    entries: list[HistoryEntry] = []
    for r in db.execute(earned_stmt).scalars().all():
        if r.status == EarnedStatus.DENIED:
            entry_type = "Denied"
        elif r.status == EarnedStatus.APPROVED:
            entry_type = "Earned"
        else:
            entry_type = "Pending"
        entries.append(HistoryEntry(
            request_id=r.id,
            sheet_type="earned",
            entry_type=entry_type,
            date=r.date,
            amount=Decimal(r.hours),
            period=r.period,
            subbed_for=r.subbed_for,
            amount_type=r.duration_type,
            denial_reason=r.denial_reason or "",
            position=earned_positions.get(r.id),
        ))

    for r in db.execute(used_stmt).scalars().all():
        entries.append(HistoryEntry(
            request_id=r.id,
            sheet_type="used",
            entry_type="Used" if r.status == UsedStatus.APPROVED else "Pending",
            date=r.date,
            amount=Decimal(r.amount),
            position=used_positions.get(r.id),
        ))

    # stable sort: same-day entries keep earned-before-used order
    return sorted(entries, key=lambda e: e.date, reverse=True)


def get_user_context(db: Session, email: str) -> dict:
    """What the client needs on load: identity, role, scope and building config."""
    member = resolve_staff(db, email) or guest(email)
    building = home_building(member)
    return {
        "email": member.email,
        "name": member.name,
        "role": member.role.value,
        "is_super_admin": member.is_super_admin,
        "building": building,
        "buildings": member.buildings,
        "building_config": asdict(get_building_config(building)),
        "all_buildings": sorted(BUILDING_CONFIG) if member.is_super_admin else member.buildings,
    }
