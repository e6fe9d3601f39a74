from typing import Generator, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from timebank.db.database import SessionLocal
from timebank.core.security import decode_access_token
from timebank.services.ledger.directory import ensure_can_act, guest, resolve_building_scope, resolve_staff
from timebank.services.ledger.notifications import LoggingNotifier, Notifier
from timebank.services.ledger.types import StaffMember

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_staff(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> StaffMember:
    """Caller identity from the bearer token. Unknown emails become guests."""
    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return resolve_staff(db, token_data.email) or guest(token_data.email)


def require_admin(current_staff: StaffMember = Depends(get_current_staff)) -> StaffMember:
    """Require Admin or Super Admin"""
    if not current_staff.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_staff


def get_building_scope(
    building: Optional[str] = None,
    current_staff: StaffMember = Depends(get_current_staff),
) -> Optional[str]:
    """
    Building filter for read queries, from the `building` query parameter.
    None means all buildings (super admins only).
    """
    return resolve_building_scope(current_staff, building)


def check_row_access(current_staff: StaffMember, building: Optional[str]) -> None:
    """Admins act on rows of their own buildings; teachers only read."""
    if not current_staff.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    ensure_can_act(current_staff, building)


def get_notifier() -> Notifier:
    return LoggingNotifier()
