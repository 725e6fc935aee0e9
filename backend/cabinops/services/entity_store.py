# Overview: Data-access adapter between the storage schema and application entities.

"""
Entity Store

Translates ORM rows into the entity dicts the API layer and the dashboard
work with, and gives the workflow engine the handful of primitives it needs
to read rows for update and to commit or roll back one unit of work.

DERIVED BACK-REFERENCES:
Cabins do not store links to their stay, issue or checklist. For each cabin
the store computes, at read time:
- current_stay_id:     newest active stay whose checkout date is today or later
- active_issue_id:     newest non-RESOLVED issue, only while the cabin is in an
                       issue status (leaving an issue status clears the link)
- pending_cleaning_id: newest SUBMITTED checklist
At most one of each is expected; when several match, the newest wins.

ERRORS:
- Missing tables raise SchemaNotProvisionedError (the only surfaced error).
- Any other failure during a read is logged and returns an empty result.
- Write-side primitives let SQLAlchemy errors propagate to the engine, which
  turns them into tagged outcomes.

USER REFERENCES:
Rows reference users by id. Usernames are resolved only here, on the way out;
a reference to a deleted user renders as "Unknown" ("System" in the log).
"""

from __future__ import annotations

from datetime import date
from functools import wraps

from flask import current_app
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..constants import ISSUE_STATUSES, ChecklistStatus, IssueStatus
from ..models import Cabin, CleaningChecklist, Issue, LogEntry, Notification, Stay, User
from .concurrency import lock_for_update
from cabinops.time_utils import start_of_day, to_utc_z, utc_today


REQUIRED_TABLES = (
    "users",
    "cabins",
    "issues",
    "stays",
    "logs",
    "notifications",
    "cleaning_checklists",
)

LOG_LIMIT = 100
NOTIFICATION_LIMIT = 50

UNKNOWN_USER = "Unknown"
SYSTEM_USER = "System"


class SchemaNotProvisionedError(Exception):
    """Raised when one or more required tables do not exist."""

    def __init__(self, missing_tables: list[str]):
        self.missing_tables = list(missing_tables)
        super().__init__(f"Missing tables: {', '.join(self.missing_tables)}")


def check_connection() -> bool:
    """
    Verify every required table is reachable.

    Returns True when all tables exist, False when the database could not be
    inspected at all (logged).

    Raises:
        SchemaNotProvisionedError: If any required table is absent
    """
    try:
        existing = set(sa_inspect(db.engine).get_table_names())
    except SQLAlchemyError:
        current_app.logger.exception("Connection check failed")
        return False

    missing = [name for name in REQUIRED_TABLES if name not in existing]
    if missing:
        raise SchemaNotProvisionedError(missing)
    return True


def _logged_read(default_factory):
    """Turn storage errors during a read into a logged, empty result."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except SQLAlchemyError:
                db.session.rollback()
                current_app.logger.exception("Store read failed [%s]", f.__name__)
                return default_factory()
        return wrapper
    return decorator


# ================================================================================
# TRANSLATION (row -> entity)
# ================================================================================

def _user_names() -> dict[str, str]:
    return {user_id: username for user_id, username in db.session.query(User.id, User.username).all()}


def _name(user_names: dict[str, str], user_id: str | None, fallback: str = UNKNOWN_USER) -> str:
    if user_id is None:
        return fallback
    return user_names.get(user_id, fallback)


def cabin_to_entity(
    cabin: Cabin,
    *,
    current_stay_id: str | None = None,
    active_issue_id: str | None = None,
    pending_cleaning_id: str | None = None,
) -> dict:
    return {
        "id": cabin.id,
        "name": cabin.name,
        "status": cabin.status,
        "icon": cabin.icon,
        "version_id": cabin.version_id,
        "current_stay_id": current_stay_id,
        "active_issue_id": active_issue_id,
        "pending_cleaning_id": pending_cleaning_id,
        "created_at": to_utc_z(cabin.created_at),
    }


def stay_to_entity(stay: Stay, user_names: dict[str, str]) -> dict:
    return {
        "id": stay.id,
        "cabin_id": stay.cabin_id,
        "guest_count": stay.guest_count,
        "nights": stay.nights,
        "checkin_date": to_utc_z(stay.checkin_date),
        "checkout_date": to_utc_z(stay.checkout_date),
        "created_by_user_id": stay.created_by_user_id,
        "created_by": _name(user_names, stay.created_by_user_id),
        "is_active": stay.is_active,
        "created_at": to_utc_z(stay.created_at),
    }


def issue_to_entity(issue: Issue, user_names: dict[str, str]) -> dict:
    return {
        "id": issue.id,
        "cabin_id": issue.cabin_id,
        "type": issue.type,
        "description": issue.description,
        "reported_by_user_id": issue.reported_by_user_id,
        "reported_by": _name(user_names, issue.reported_by_user_id),
        "reported_at": to_utc_z(issue.reported_at),
        "status": issue.status,
        "resolved_at": to_utc_z(issue.resolved_at),
    }


def checklist_to_entity(checklist: CleaningChecklist, user_names: dict[str, str]) -> dict:
    return {
        "id": checklist.id,
        "cabin_id": checklist.cabin_id,
        "items": dict(checklist.items or {}),
        "filled_by_user_id": checklist.filled_by_user_id,
        "filled_by": _name(user_names, checklist.filled_by_user_id),
        "approved_by_user_id": checklist.approved_by_user_id,
        "approved_by": (
            _name(user_names, checklist.approved_by_user_id) if checklist.approved_by_user_id else None
        ),
        "status": checklist.status,
        "created_at": to_utc_z(checklist.created_at),
        "approved_at": to_utc_z(checklist.approved_at),
    }


def log_to_entity(entry: LogEntry, user_names: dict[str, str]) -> dict:
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "username": _name(user_names, entry.user_id, fallback=SYSTEM_USER),
        "action": entry.action,
        "details": entry.details or "",
        "timestamp": to_utc_z(entry.created_at),
    }


def notification_to_entity(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "message": notification.message,
        "read": notification.read,
        "timestamp": to_utc_z(notification.created_at),
    }


# ================================================================================
# READS
# ================================================================================

def _newest_by_cabin(rows) -> dict[str, str]:
    """rows are (id, cabin_id) ordered newest first; keep the first per cabin."""
    result: dict[str, str] = {}
    for row_id, cabin_id in rows:
        result.setdefault(cabin_id, row_id)
    return result


@_logged_read(list)
def get_cabins(today: date | None = None) -> list[dict]:
    """All cabins ordered by name, with derived back-references."""
    cabins = db.session.query(Cabin).order_by(Cabin.name.asc()).all()
    if not cabins:
        return []

    day_start = start_of_day(today or utc_today())

    current_stays = _newest_by_cabin(
        db.session.query(Stay.id, Stay.cabin_id)
        .filter(Stay.is_active.is_(True), Stay.checkout_date >= day_start)
        .order_by(Stay.checkin_date.desc(), Stay.created_at.desc())
        .all()
    )
    open_issues = _newest_by_cabin(
        db.session.query(Issue.id, Issue.cabin_id)
        .filter(Issue.status != IssueStatus.RESOLVED)
        .order_by(Issue.reported_at.desc())
        .all()
    )
    pending_cleanings = _newest_by_cabin(
        db.session.query(CleaningChecklist.id, CleaningChecklist.cabin_id)
        .filter(CleaningChecklist.status == ChecklistStatus.SUBMITTED)
        .order_by(CleaningChecklist.created_at.desc())
        .all()
    )

    return [
        cabin_to_entity(
            cabin,
            current_stay_id=current_stays.get(cabin.id),
            active_issue_id=open_issues.get(cabin.id) if cabin.status in ISSUE_STATUSES else None,
            pending_cleaning_id=pending_cleanings.get(cabin.id),
        )
        for cabin in cabins
    ]


def get_cabin(cabin_id: str, today: date | None = None) -> dict | None:
    for cabin in get_cabins(today):
        if cabin["id"] == cabin_id:
            return cabin
    return None


@_logged_read(list)
def get_users() -> list[dict]:
    users = db.session.query(User).order_by(User.username.asc()).all()
    return [user.to_dict() for user in users]


@_logged_read(list)
def get_stays() -> list[dict]:
    stays = db.session.query(Stay).order_by(Stay.created_at.desc()).all()
    user_names = _user_names()
    return [stay_to_entity(stay, user_names) for stay in stays]


@_logged_read(list)
def get_issues() -> list[dict]:
    issues = db.session.query(Issue).order_by(Issue.reported_at.desc()).all()
    user_names = _user_names()
    return [issue_to_entity(issue, user_names) for issue in issues]


@_logged_read(list)
def get_logs(limit: int = LOG_LIMIT) -> list[dict]:
    entries = (
        db.session.query(LogEntry)
        .order_by(LogEntry.created_at.desc())
        .limit(limit)
        .all()
    )
    user_names = _user_names()
    return [log_to_entity(entry, user_names) for entry in entries]


@_logged_read(list)
def get_notifications(limit: int = NOTIFICATION_LIMIT) -> list[dict]:
    notifications = (
        db.session.query(Notification)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )
    return [notification_to_entity(n) for n in notifications]


@_logged_read(lambda: None)
def get_checklist(checklist_id: str) -> dict | None:
    checklist = db.session.get(CleaningChecklist, checklist_id)
    if checklist is None:
        return None
    return checklist_to_entity(checklist, _user_names())


def load_snapshot(today: date | None = None) -> dict:
    """
    Full reload of every collection.

    Raises:
        SchemaNotProvisionedError: If the schema has not been provisioned
    """
    check_connection()
    return {
        "cabins": get_cabins(today),
        "users": get_users(),
        "stays": get_stays(),
        "issues": get_issues(),
        "logs": get_logs(),
        "notifications": get_notifications(),
    }


# ================================================================================
# WRITE-SIDE PRIMITIVES (used by the workflow engine)
# ================================================================================

def get_cabin_for_update(cabin_id: str) -> Cabin | None:
    return lock_for_update(db.session.query(Cabin).filter_by(id=cabin_id)).first()


def get_issue_for_update(issue_id: str) -> Issue | None:
    return lock_for_update(db.session.query(Issue).filter_by(id=issue_id)).first()


def get_checklist_for_update(checklist_id: str) -> CleaningChecklist | None:
    return lock_for_update(db.session.query(CleaningChecklist).filter_by(id=checklist_id)).first()


def get_user_row(user_id: str) -> User | None:
    return db.session.get(User, user_id)


def find_user_by_username(username: str) -> User | None:
    return db.session.query(User).filter_by(username=username).first()


def find_open_issue(cabin_id: str) -> Issue | None:
    return (
        db.session.query(Issue)
        .filter(Issue.cabin_id == cabin_id, Issue.status != IssueStatus.RESOLVED)
        .order_by(Issue.reported_at.desc())
        .first()
    )


def find_active_stays(cabin_id: str) -> list[Stay]:
    return (
        db.session.query(Stay)
        .filter(Stay.cabin_id == cabin_id, Stay.is_active.is_(True))
        .all()
    )


def has_pending_checklist(cabin_id: str) -> bool:
    return (
        db.session.query(CleaningChecklist.id)
        .filter_by(cabin_id=cabin_id, status=ChecklistStatus.SUBMITTED)
        .first()
        is not None
    )


def stage(*rows) -> None:
    for row in rows:
        db.session.add(row)


def remove(row) -> None:
    db.session.delete(row)


def commit() -> None:
    db.session.commit()


def rollback() -> None:
    db.session.rollback()
