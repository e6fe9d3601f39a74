"""
Outbound notification port.
Delivery (email markup, SMTP) lives outside this service; the ledger only
says who should hear about what. A failed notification never undoes the
state change that triggered it.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from .balances import balance_for
from .queries import staff_history


logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


class NotificationKind(str, Enum):
    EARNED_APPROVED = "EARNED_APPROVED"
    EARNED_DENIED = "EARNED_DENIED"
    STATUS_REPORT = "STATUS_REPORT"
    COVERAGE_REQUEST = "COVERAGE_REQUEST"
    COVERAGE_REQUESTED = "COVERAGE_REQUESTED"
    COVERAGE_ACCEPTED = "COVERAGE_ACCEPTED"
    COVERAGE_DECLINED = "COVERAGE_DECLINED"


class Notifier(ABC):
    """Abstract base for notification channels."""

    @abstractmethod
    def notify(self, recipient: str, kind: NotificationKind, payload: dict) -> None:
        ...


class LoggingNotifier(Notifier):
    """Default channel: writes the notification to the log."""

    def notify(self, recipient: str, kind: NotificationKind, payload: dict) -> None:
        logger.info("Notification %s -> %s: %s", kind.value, recipient, payload)


def send_notification(
    notifier: Optional[Notifier],
    recipient: str,
    kind: NotificationKind,
    payload: dict,
) -> bool:
    """Fire and forget. Returns False (and logs) when delivery fails."""
    if notifier is None:
        notifier = LoggingNotifier()
    try:
        notifier.notify(recipient, kind, payload)
        return True
    except Exception:
        logger.exception("Failed to send %s notification to %s", kind.value, recipient)
        return False


def send_status_reports(db: Session, emails: list[str], notifier: Optional[Notifier] = None) -> dict:
    """
    Send each listed staff member their balance and history.
    Unknown staff count as failures; one failure never stops the rest.
    """
    success = 0
    failed = 0
    for email in emails:
        try:
            balance = balance_for(db, email)
            history = staff_history(db, balance.email)
        except Exception:
            logger.exception("Could not build status report for %s", email)
            failed += 1
            continue

        payload = {
            "name": balance.name or "Staff Member",
            "balance": str(balance.balance.quantize(_CENTS)),
            "history": [
                {
                    "date": h.date.isoformat(),
                    "type": h.entry_type,
                    "amount": str(h.amount),
                    "subbed_for": h.subbed_for,
                    "denial_reason": h.denial_reason,
                }
                for h in history
                if h.entry_type != "Pending"
            ],
        }
        if send_notification(notifier, balance.email, NotificationKind.STATUS_REPORT, payload):
            success += 1
        else:
            failed += 1

    return {"success": success, "failed": failed}
