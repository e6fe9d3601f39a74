from sqlalchemy import Integer, String, DateTime, func
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column

from timebank.db.database import Base


class AvailabilitySlots(Base):
    __tablename__ = "availability_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    days: Mapped[str] = mapped_column(String(100), nullable=False)  # "Mon,Tue"
    period: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())
