from decimal import Decimal
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timebank.db.database import Base


class ArchiveRecords(Base):
    """Raw copy of an earned submission, kept alongside the ledger row."""
    __tablename__ = "archive_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subbed_for: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    other_flag: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    # may carry a time-of-day; matched by calendar day only
    covered_on: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    period: Mapped[str] = mapped_column(String(100), nullable=False)
    duration_type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    # null on rows imported before the reference existed
    earned_request_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("earned_requests.id", ondelete="SET NULL"), nullable=True, index=True)
