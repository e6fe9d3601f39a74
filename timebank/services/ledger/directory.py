"""
Staff directory read model.
Loads staff rows with their ordered building memberships and resolves which
building a caller is allowed to look at.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from timebank.core.buildings import building_exists, normalize_building_code
from timebank.core.config import settings
from timebank.core.errors import NotFoundError, ScopeViolation
from timebank.db.database import transaction
from timebank.db.models.staff_buildings import StaffBuildings
from timebank.db.models.staff_members import StaffMembers, StaffRole

from .types import StaffMember


logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return str(email or "").strip().lower()


def _load_buildings(db: Session, staff_ids: list[int]) -> dict[int, list[str]]:
    if not staff_ids:
        return {}
    stmt = (
        select(StaffBuildings)
        .where(StaffBuildings.staff_id.in_(staff_ids))
        .order_by(StaffBuildings.staff_id, StaffBuildings.position, StaffBuildings.id)
    )
    memberships: dict[int, list[str]] = {}
    for row in db.execute(stmt).scalars().all():
        memberships.setdefault(row.staff_id, []).append(row.building_code)
    return memberships


def _to_member(row: StaffMembers, buildings: list[str]) -> StaffMember:
    return StaffMember(
        email=row.email,
        name=row.name,
        role=row.role,
        buildings=buildings,
        carry_over=Decimal(row.carry_over or 0),
    )


def resolve_staff(db: Session, email: Optional[str]) -> Optional[StaffMember]:
    """Look a staff member up by email (case-insensitive). None if unknown."""
    email = normalize_email(email)
    if not email:
        return None
    row = db.execute(select(StaffMembers).where(StaffMembers.email == email)).scalars().first()
    if row is None:
        return None
    return _to_member(row, _load_buildings(db, [row.id]).get(row.id, []))


def require_staff(db: Session, email: Optional[str]) -> StaffMember:
    member = resolve_staff(db, email)
    if member is None:
        raise NotFoundError(f"Staff member '{email}' not found")
    return member


def list_staff(db: Session, building: Optional[str] = None) -> list[StaffMember]:
    """All staff, ordered by name, optionally only members of one building."""
    rows = db.execute(select(StaffMembers).order_by(StaffMembers.name)).scalars().all()
    memberships = _load_buildings(db, [r.id for r in rows])
    members = [_to_member(r, memberships.get(r.id, [])) for r in rows]

    building = normalize_building_code(building)
    if building:
        members = [m for m in members if building in m.buildings]
    return members


def guest(email: str) -> StaffMember:
    """Callers missing from the directory still get a (powerless) identity."""
    return StaffMember(email=normalize_email(email), name="", role=StaffRole.GUEST)


def home_building(member: StaffMember) -> str:
    return member.primary_building or settings.DEFAULT_BUILDING


def resolve_building_scope(
    member: StaffMember,
    requested: Optional[str] = None,
    exists: Callable[[Optional[str]], bool] = building_exists,
) -> Optional[str]:
    """
    Decide which building a caller's query is filtered to.

    Super admins see everything when they ask for nothing, and any configured
    building they ask for. Everyone else may pick among their own buildings.
    Anything else quietly falls back to the caller's own building, so a stale
    filter from the client never turns into an error or a foreign scope.
    Returns None for "all buildings".
    """
    requested = normalize_building_code(requested)

    if member.is_super_admin:
        if requested is None:
            return None
        if exists(requested):
            return requested
        logger.warning("Unknown building filter %r from %s, using own scope", requested, member.email)
        return home_building(member)

    if requested and exists(requested) and requested in member.buildings:
        return requested
    if requested:
        logger.warning("Building filter %r outside scope of %s, using own scope", requested, member.email)
    return home_building(member)


def ensure_can_act(member: StaffMember, building: Optional[str]) -> None:
    """Raise ScopeViolation when a non-super-admin touches another building's row."""
    if member.is_super_admin:
        return
    if building not in member.buildings and building != home_building(member):
        raise ScopeViolation(f"{member.email} cannot act on rows for building {building}")


def set_carry_over(db: Session, email: str, hours: Decimal) -> StaffMember:
    email = normalize_email(email)
    with transaction(db):
        row = db.execute(select(StaffMembers).where(StaffMembers.email == email)).scalars().first()
        if row is None:
            raise NotFoundError(f"Staff member '{email}' not found")
        row.carry_over = Decimal(hours)
    logger.info("Carry-over for %s set to %s", email, hours)
    return require_staff(db, email)
