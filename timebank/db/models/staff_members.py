from decimal import Decimal
from enum import Enum
from datetime import datetime
from sqlalchemy import Integer, String, Numeric, DateTime, func, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from timebank.db.database import Base


class StaffRole(str, Enum):
    TEACHER = "Teacher"
    ADMIN = "Admin"
    SUPER_ADMIN = "Super Admin"
    GUEST = "Guest"


class StaffMembers(Base):
    __tablename__ = "staff_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # stored lower-cased; the directory is keyed on email
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[StaffRole] = mapped_column(SQLEnum(StaffRole, name="staff_role_enum", values_callable=lambda e: [m.value for m in e]), nullable=False, default=StaffRole.TEACHER)
    carry_over: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
