"""
Batch orchestrator: one state-machine operation over many request ids.

Ids are processed highest first. With stable ids this no longer protects
anything, but it keeps batches correct for any operation that still
addresses rows by position. Each item runs in its own transaction and a
failing item is recorded and skipped.
"""

import logging
from typing import Callable, Iterable, Optional

from sqlalchemy.orm import Session

from .directory import ensure_can_act
from .state_machine import (
    approve_earned,
    approve_used,
    delete_earned,
    delete_used,
    deny_earned,
    get_earned,
    get_used,
)
from .types import BatchResult, StaffMember


logger = logging.getLogger(__name__)


def apply_batch(operation: Callable[[int], object], ids: Iterable[int], label: str = "batch") -> BatchResult:
    result = BatchResult()
    for request_id in sorted(set(ids), reverse=True):
        try:
            operation(request_id)
            result.succeeded += 1
        except Exception as e:
            logger.exception("Batch item %s failed", request_id)
            result.failed += 1
            result.errors[request_id] = str(e)

    logger.info("%s: %d succeeded, %d failed", label, result.succeeded, result.failed)
    return result


def _scoped(
    operation: Callable[[int], object],
    lookup: Callable[[int], object],
    actor: Optional[StaffMember],
) -> Callable[[int], object]:
    """With an actor, rows outside the actor's buildings fail as ScopeViolation."""
    if actor is None:
        return operation

    def run(request_id: int):
        ensure_can_act(actor, lookup(request_id).building)
        return operation(request_id)

    return run


# Batch actions never notify.

def batch_approve_earned(db: Session, ids: Iterable[int], actor: Optional[StaffMember] = None) -> BatchResult:
    operation = _scoped(lambda i: approve_earned(db, i, notify=False), lambda i: get_earned(db, i), actor)
    return apply_batch(operation, ids, "approve earned")


def batch_deny_earned(
    db: Session,
    ids: Iterable[int],
    reasons: Iterable[str] = (),
    note: Optional[str] = None,
    actor: Optional[StaffMember] = None,
) -> BatchResult:
    reasons = list(reasons or [])
    operation = _scoped(
        lambda i: deny_earned(db, i, reasons=reasons, note=note, notify=False),
        lambda i: get_earned(db, i),
        actor,
    )
    return apply_batch(operation, ids, "deny earned")


def batch_delete_earned(db: Session, ids: Iterable[int], actor: Optional[StaffMember] = None) -> BatchResult:
    operation = _scoped(lambda i: delete_earned(db, i), lambda i: get_earned(db, i), actor)
    return apply_batch(operation, ids, "delete earned")


def batch_approve_used(db: Session, ids: Iterable[int], actor: Optional[StaffMember] = None) -> BatchResult:
    operation = _scoped(lambda i: approve_used(db, i), lambda i: get_used(db, i), actor)
    return apply_batch(operation, ids, "approve used")


def batch_delete_used(db: Session, ids: Iterable[int], actor: Optional[StaffMember] = None) -> BatchResult:
    operation = _scoped(lambda i: delete_used(db, i), lambda i: get_used(db, i), actor)
    return apply_batch(operation, ids, "delete used")
