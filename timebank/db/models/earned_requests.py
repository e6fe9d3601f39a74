from decimal import Decimal
from typing import Optional
from enum import Enum
import datetime as dt
from sqlalchemy import Date, DateTime, Enum as SQLEnum, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from timebank.db.database import Base


class EarnedStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class EarnedRequests(Base):
    __tablename__ = "earned_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    subbed_for: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    other_details: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    period: Mapped[str] = mapped_column(String(100), nullable=False)
    duration_type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    building: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    status: Mapped[EarnedStatus] = mapped_column(SQLEnum(EarnedStatus, name="earned_status_enum"), nullable=False, default=EarnedStatus.PENDING)
    approved_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    denied_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    denial_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
