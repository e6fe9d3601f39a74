from sqlalchemy import Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from timebank.db.database import Base


class StaffBuildings(Base):
    __tablename__ = "staff_buildings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    staff_id: Mapped[int] = mapped_column(Integer, ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)
    building_code: Mapped[str] = mapped_column(String(10), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0 = primary

    __table_args__ = (
        UniqueConstraint("staff_id", "building_code"),
    )
