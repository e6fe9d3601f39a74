from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timebank.api.deps import get_current_staff, get_db
from timebank.services.ledger import get_user_context
from timebank.services.ledger.types import StaffMember

router = APIRouter(prefix="/me", tags=["me"])


@router.get("")
def get_me(
    db: Session = Depends(get_db),
    current_staff: StaffMember = Depends(get_current_staff),
):
    """Identity, role, buildings and building config for the client on load"""
    return get_user_context(db, current_staff.email)
