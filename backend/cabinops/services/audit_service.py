# Overview: Service-layer operations for the audit trail; one log entry and one notification per action.

from __future__ import annotations

from ..models import LogEntry, Notification, User
from . import entity_store
from cabinops.time_utils import utcnow


def format_notification(username: str, action: str, details: str) -> str:
    return f"{username}: {action} - {details}"


def record_action(operator: User, action: str, details: str) -> tuple[LogEntry, Notification]:
    """
    Stage the audit rows for a workflow operation.

    Nothing is committed here; the caller commits them together with the
    state change they describe.
    """
    now = utcnow()
    entry = LogEntry(user_id=operator.id, action=action, details=details, created_at=now)
    notification = Notification(
        message=format_notification(operator.username, action, details),
        read=False,
        created_at=now,
    )
    entity_store.stage(entry, notification)
    return entry, notification
