from timebank.db.database import Base

# Import models
from timebank.db.models.staff_members import StaffMembers, StaffRole
from timebank.db.models.staff_buildings import StaffBuildings
from timebank.db.models.earned_requests import EarnedRequests, EarnedStatus
from timebank.db.models.used_requests import UsedRequests, UsedStatus
from timebank.db.models.archive_records import ArchiveRecords
from timebank.db.models.availability_slots import AvailabilitySlots

__all__ = [
    "Base",
    # Models
    "StaffMembers",
    "StaffBuildings",
    "EarnedRequests",
    "UsedRequests",
    "ArchiveRecords",
    "AvailabilitySlots",
    # Enums
    "StaffRole",
    "EarnedStatus",
    "UsedStatus",
]
