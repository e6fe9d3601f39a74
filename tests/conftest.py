import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timebank.db.database import Base
from timebank.db.models import StaffBuildings, StaffMembers, StaffRole
from timebank.schemas.earned_requests import EarnedRequestCreate
from timebank.schemas.used_requests import UsedRequestCreate
from timebank.services.ledger.submissions import record_earned, record_usage


SUPER_ADMIN = "boss@x.org"
OMS_ADMIN = "admin@x.org"
OHS_ADMIN = "adminhs@x.org"
ALICE = "alice@x.org"    # teacher, OMS
BEN = "ben@x.org"        # teacher, OHS
MIA = "mia@x.org"        # teacher, OHS (primary) and OMS


def get_test_today() -> date:
    # fixed mid-October date for deterministic school-year windows
    return date(2025, 10, 15)


def add_staff(db, name: str, email: str, role: StaffRole, buildings: list[str], carry_over: str = "0") -> StaffMembers:
    member = StaffMembers(name=name, email=email, role=role, carry_over=Decimal(carry_over))
    db.add(member)
    db.flush()
    for position, code in enumerate(buildings):
        db.add(StaffBuildings(staff_id=member.id, building_code=code, position=position))
    db.commit()
    return member


def make_earned(
    db,
    email: str = ALICE,
    on: Optional[date] = None,
    period: str = "Period 3",
    hours: Optional[str] = "1",
    duration_type: str = "Full Period",
    subbed_for: str = "Mrs. Smith",
    building: Optional[str] = None,
):
    return record_earned(db, EarnedRequestCreate(
        email=email,
        date=on or get_test_today(),
        period=period,
        hours=Decimal(hours) if hours is not None else None,
        duration_type=duration_type,
        subbed_for=subbed_for,
        building=building,
    ))


def make_used(db, email: str = ALICE, on: Optional[date] = None, amount: str = "1", building: Optional[str] = None):
    return record_usage(db, UsedRequestCreate(
        email=email,
        date=on or get_test_today(),
        amount=Decimal(amount),
        building=building,
    ))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def staff(db):
    # directory shared by most tests
    add_staff(db, "Pat Boss", SUPER_ADMIN, StaffRole.SUPER_ADMIN, ["OMS"])
    add_staff(db, "Oscar Admin", OMS_ADMIN, StaffRole.ADMIN, ["OMS"])
    add_staff(db, "Hana Admin", OHS_ADMIN, StaffRole.ADMIN, ["OHS"])
    add_staff(db, "Alice Adams", ALICE, StaffRole.TEACHER, ["OMS"], carry_over="2")
    add_staff(db, "Ben Brooks", BEN, StaffRole.TEACHER, ["OHS"])
    add_staff(db, "Mia Moss", MIA, StaffRole.TEACHER, ["OHS", "OMS"])
    return db
