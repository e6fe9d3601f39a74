"""
Ledger service package.

Usage:
    from timebank.db.database import SessionLocal
    from timebank.schemas.earned_requests import EarnedRequestCreate
    from timebank.services.ledger import record_earned, approve_earned, compute_balances

    db = SessionLocal()

    request = record_earned(db, EarnedRequestCreate(email="a@x.org", date=..., period="Period 3"))
    approve_earned(db, request.id, notify=True)

    balances = compute_balances(db, building="OMS")
"""

from .types import (
    StaffMember,
    BalanceTotals,
    StaffBalance,
    PendingSummary,
    HistoryEntry,
    BatchResult,
)
from .directory import (
    resolve_staff,
    require_staff,
    list_staff,
    resolve_building_scope,
    ensure_can_act,
    set_carry_over,
)
from .balances import compute_balances, staff_balances, balance_for
from .archive import find_archive_match, locate_archive
from .state_machine import (
    approve_earned,
    deny_earned,
    revert_earned,
    delete_earned,
    edit_earned,
    approve_used,
    revert_used,
    delete_used,
    edit_used,
)
from .batch import (
    apply_batch,
    batch_approve_earned,
    batch_deny_earned,
    batch_delete_earned,
    batch_approve_used,
    batch_delete_used,
)
from .submissions import (
    record_earned,
    record_usage,
    admin_submit_request,
    process_submission_queue,
)
from .queries import (
    list_pending_earned,
    list_pending_used,
    dashboard_counts,
    staff_history,
    get_user_context,
)
from .notifications import Notifier, LoggingNotifier, NotificationKind, send_status_reports

__all__ = [
    # Types
    "StaffMember",
    "BalanceTotals",
    "StaffBalance",
    "PendingSummary",
    "HistoryEntry",
    "BatchResult",
    # Directory
    "resolve_staff",
    "require_staff",
    "list_staff",
    "resolve_building_scope",
    "ensure_can_act",
    "set_carry_over",
    # Balances
    "compute_balances",
    "staff_balances",
    "balance_for",
    # Archive
    "find_archive_match",
    "locate_archive",
    # State machine
    "approve_earned",
    "deny_earned",
    "revert_earned",
    "delete_earned",
    "edit_earned",
    "approve_used",
    "revert_used",
    "delete_used",
    "edit_used",
    # Batch
    "apply_batch",
    "batch_approve_earned",
    "batch_deny_earned",
    "batch_delete_earned",
    "batch_approve_used",
    "batch_delete_used",
    # Submissions
    "record_earned",
    "record_usage",
    "admin_submit_request",
    "process_submission_queue",
    # Queries
    "list_pending_earned",
    "list_pending_used",
    "dashboard_counts",
    "staff_history",
    "get_user_context",
    # Notifications
    "Notifier",
    "LoggingNotifier",
    "NotificationKind",
    "send_status_reports",
]
