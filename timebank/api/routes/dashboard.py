from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timebank.api.deps import get_building_scope, get_db, require_admin
from timebank.services.ledger import dashboard_counts
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/counts")
def get_counts(
    building: Optional[str] = Depends(get_building_scope),
    db: Session = Depends(get_db),
    _: StaffMember = Depends(require_admin),
):
    return dashboard_counts(db, building)
