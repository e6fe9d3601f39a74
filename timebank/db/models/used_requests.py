from decimal import Decimal
from typing import Optional
from enum import Enum
import datetime as dt
from sqlalchemy import Date, DateTime, Enum as SQLEnum, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timebank.db.database import Base


class UsedStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


class UsedRequests(Base):
    __tablename__ = "used_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    building: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    status: Mapped[UsedStatus] = mapped_column(SQLEnum(UsedStatus, name="used_status_enum"), nullable=False, default=UsedStatus.PENDING)
    approved_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
