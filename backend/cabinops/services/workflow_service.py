# Overview: Service-layer operations for the cabin lifecycle; the workflow engine.

"""
Cabin Workflow Engine

================================================================================
PURPOSE: Drive cabin status transitions and the side tables they touch
================================================================================

STATE MACHINE (cabin status):
    EMPTY_CLEAN  -> OCCUPIED       check_in
    OCCUPIED     -> EMPTY_DIRTY    change_cabin_status (checkout; ends the stay)
    EMPTY_DIRTY  -> (pending)      submit_cleaning_checklist (no status change)
    EMPTY_DIRTY  -> EMPTY_CLEAN    approve_cleaning_checklist
    any          -> ISSUE_*        report_issue
    ISSUE_TECH   -> EMPTY_DIRTY    resolve_issue + change_cabin_status
    any          -> any            change_cabin_status by ADMIN (override)

There is no terminal state.

PROTOCOL (every operation):
1. Role check                         -> FORBIDDEN
2. Load rows (FOR UPDATE)             -> NOT_FOUND
3. expected_version compare-and-set   -> CONFLICT
4. Preconditions                      -> INVALID (ADMIN skips cabin-state ones)
5. Stage writes + one LogEntry + one Notification
6. Commit once. StaleDataError -> CONFLICT, other storage errors -> STORE_ERROR

Nothing raises out of this module; callers get a WorkflowResult and reload
state from the entity store. No retries.
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..constants import (
    CLEANING_ITEMS,
    ISSUE_STATUSES,
    VALID_CABIN_STATUSES,
    CabinStatus,
    ChecklistStatus,
    IssueStatus,
    status_for_issue_type,
)
from ..models import CleaningChecklist, Issue, Stay, User
from ..permissions import (
    can_resolve_issue_type,
    is_action_permitted,
    is_admin,
    is_transition_permitted,
)
from . import audit_service, entity_store
from .auth_service import PasswordValidationError, build_user, hash_password, validate_role
from .concurrency import VersionConflict, check_expected_version
from cabinops.time_utils import add_days, utcnow


class Outcome:
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID = "INVALID"
    CONFLICT = "CONFLICT"
    STORE_ERROR = "STORE_ERROR"


@dataclass
class WorkflowResult:
    outcome: str
    message: str = ""
    entity_id: str | None = None
    payload: dict | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK


class WorkflowRejected(Exception):
    """Raised inside an operation to stop it before anything is committed."""

    def __init__(self, outcome: str, message: str):
        self.outcome = outcome
        self.message = message
        super().__init__(message)


def _reject(outcome: str, message: str):
    raise WorkflowRejected(outcome, message)


def _require_action(operator: User | None, action: str) -> None:
    role = operator.role if operator is not None else None
    if not is_action_permitted(role, action):
        _reject(Outcome.FORBIDDEN, f"Role {role} may not perform {action}")


def _execute(action: str, operator: User | None, op) -> WorkflowResult:
    """Run one operation as a single unit of work and tag its outcome."""
    try:
        return op()
    except WorkflowRejected as exc:
        entity_store.rollback()
        username = operator.username if operator is not None else None
        if exc.outcome == Outcome.FORBIDDEN:
            current_app.logger.warning("Forbidden %s by %s: %s", action, username, exc.message)
        else:
            current_app.logger.info("%s rejected (%s) for %s: %s", action, exc.outcome, username, exc.message)
        return WorkflowResult(exc.outcome, exc.message)
    except (VersionConflict, StaleDataError) as exc:
        entity_store.rollback()
        current_app.logger.info("%s conflict: %s", action, exc)
        return WorkflowResult(Outcome.CONFLICT, "Cabin was changed by another operator; reload and try again")
    except SQLAlchemyError:
        entity_store.rollback()
        current_app.logger.exception("%s failed", action)
        return WorkflowResult(Outcome.STORE_ERROR, "Storage error")


def _load_cabin(cabin_id: str, expected_version: int | None = None):
    cabin = entity_store.get_cabin_for_update(cabin_id)
    if not cabin:
        _reject(Outcome.NOT_FOUND, f"Cabin {cabin_id} not found")
    check_expected_version(cabin, expected_version)
    return cabin


def _positive_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        _reject(Outcome.INVALID, f"{field} must be a positive integer")
    return value


# ================================================================================
# CABIN STATUS
# ================================================================================

def change_cabin_status(
    cabin_id: str,
    new_status: str,
    operator: User,
    details: str = "",
    expected_version: int | None = None,
) -> WorkflowResult:
    """
    Set a cabin's status.

    OCCUPIED -> EMPTY_DIRTY is the checkout: the cabin's active stays end.
    Leaving an issue status detaches the open issue from the cabin (the
    entity store only links an open issue while the cabin is in an issue
    status); the issue itself is resolved separately.
    """
    def _op():
        _require_action(operator, "CHANGE_STATUS")
        if new_status not in VALID_CABIN_STATUSES:
            _reject(Outcome.INVALID, f"Unknown cabin status '{new_status}'")

        cabin = _load_cabin(cabin_id, expected_version)
        old_status = cabin.status
        if not is_transition_permitted(operator.role, old_status, new_status):
            _reject(Outcome.FORBIDDEN, f"Role {operator.role} may not change {old_status} to {new_status}")

        if old_status == CabinStatus.OCCUPIED and new_status == CabinStatus.EMPTY_DIRTY:
            for stay in entity_store.find_active_stays(cabin.id):
                stay.is_active = False

        cabin.status = new_status

        message = f"{cabin.name} changed from {old_status} to {new_status}."
        if details:
            message = f"{message} {details}"
        audit_service.record_action(operator, "CHANGE_STATUS", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, cabin_id)

    return _execute("CHANGE_STATUS", operator, _op)


def check_in(
    cabin_id: str,
    guest_count: int,
    nights: int,
    operator: User,
    expected_version: int | None = None,
) -> WorkflowResult:
    """Start a stay (checkout = checkin + nights days) and mark the cabin OCCUPIED."""
    def _op():
        _require_action(operator, "CHECK_IN")
        guests = _positive_int(guest_count, "guest_count")
        stay_nights = _positive_int(nights, "nights")

        cabin = _load_cabin(cabin_id, expected_version)
        if cabin.status != CabinStatus.EMPTY_CLEAN and not is_admin(operator.role):
            _reject(Outcome.INVALID, f"{cabin.name} is {cabin.status}; check-in needs EMPTY_CLEAN")

        # one active stay per cabin
        for previous in entity_store.find_active_stays(cabin.id):
            previous.is_active = False

        now = utcnow()
        stay = Stay(
            cabin_id=cabin.id,
            guest_count=guests,
            nights=stay_nights,
            checkin_date=now,
            checkout_date=add_days(now, stay_nights),
            created_by_user_id=operator.id,
            is_active=True,
            created_at=now,
        )
        entity_store.stage(stay)
        cabin.status = CabinStatus.OCCUPIED

        message = f"{cabin.name} checked in: {guests} guests for {stay_nights} nights"
        audit_service.record_action(operator, "CHECK_IN", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, stay.id)

    return _execute("CHECK_IN", operator, _op)


# ================================================================================
# ISSUES
# ================================================================================

def report_issue(cabin_id: str, issue_type: str, description: str, operator: User) -> WorkflowResult:
    """Open an issue and move the cabin to the matching issue status. Stays are untouched."""
    def _op():
        _require_action(operator, "REPORT_ISSUE")
        issue_kind = (issue_type or "").strip()
        text = (description or "").strip()
        if not issue_kind:
            _reject(Outcome.INVALID, "Issue type is required")
        if not text:
            _reject(Outcome.INVALID, "Issue description is required")

        cabin = _load_cabin(cabin_id)
        if (
            not is_admin(operator.role)
            and cabin.status in ISSUE_STATUSES
            and entity_store.find_open_issue(cabin.id) is not None
        ):
            _reject(Outcome.INVALID, f"{cabin.name} already has an open issue")

        issue = Issue(
            cabin_id=cabin.id,
            type=issue_kind,
            status=IssueStatus.OPEN,
            description=text,
            reported_by_user_id=operator.id,
            reported_at=utcnow(),
        )
        entity_store.stage(issue)
        cabin.status = status_for_issue_type(issue_kind)

        message = f"{cabin.name}: {issue_kind} issue reported - {text}"
        audit_service.record_action(operator, "REPORT_ISSUE", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, issue.id)

    return _execute("REPORT_ISSUE", operator, _op)


def resolve_issue(issue_id: str, operator: User) -> WorkflowResult:
    """Mark an issue RESOLVED, once. The cabin status is left alone."""
    def _op():
        _require_action(operator, "RESOLVE_ISSUE")

        issue = entity_store.get_issue_for_update(issue_id)
        if not issue:
            _reject(Outcome.NOT_FOUND, f"Issue {issue_id} not found")
        if not can_resolve_issue_type(operator.role, issue.type):
            _reject(Outcome.FORBIDDEN, f"Role {operator.role} may not resolve {issue.type} issues")
        if issue.status == IssueStatus.RESOLVED:
            _reject(Outcome.INVALID, "Issue is already resolved")

        issue.status = IssueStatus.RESOLVED
        issue.resolved_at = utcnow()

        message = f"{issue.cabin.name}: {issue.type} issue resolved"
        audit_service.record_action(operator, "RESOLVE_ISSUE", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, issue_id)

    return _execute("RESOLVE_ISSUE", operator, _op)


def resolve_technical_issue(cabin_id: str, operator: User) -> WorkflowResult:
    """
    Confirm a technical fix: resolve the cabin's open issue, then send the
    cabin to EMPTY_DIRTY. Two operations, two log entries.
    """
    def _check():
        _require_action(operator, "RESOLVE_ISSUE")
        cabin = entity_store.get_cabin_for_update(cabin_id)
        if not cabin:
            _reject(Outcome.NOT_FOUND, f"Cabin {cabin_id} not found")
        if cabin.status != CabinStatus.ISSUE_TECH and not is_admin(operator.role):
            _reject(Outcome.INVALID, f"{cabin.name} is {cabin.status}; expected ISSUE_TECH")
        if not is_transition_permitted(operator.role, cabin.status, CabinStatus.EMPTY_DIRTY):
            _reject(Outcome.FORBIDDEN, f"Role {operator.role} may not release {cabin.name}")
        issue = entity_store.find_open_issue(cabin.id)
        if issue is None:
            _reject(Outcome.INVALID, f"{cabin.name} has no open issue")
        issue_id = issue.id
        entity_store.rollback()
        return WorkflowResult(Outcome.OK, "", issue_id)

    checked = _execute("RESOLVE_ISSUE", operator, _check)
    if not checked.ok:
        return checked

    resolved = resolve_issue(checked.entity_id, operator)
    if not resolved.ok:
        return resolved

    return change_cabin_status(cabin_id, CabinStatus.EMPTY_DIRTY, operator, details="Technical issue fixed")


# ================================================================================
# CLEANING
# ================================================================================

def _validate_checklist_items(items) -> dict:
    if not isinstance(items, dict):
        _reject(Outcome.INVALID, "Checklist items must be an object of item -> bool")
    unknown = [name for name in items if name not in CLEANING_ITEMS]
    if unknown:
        _reject(Outcome.INVALID, f"Unknown checklist items: {', '.join(unknown)}")
    unchecked = [name for name in CLEANING_ITEMS if items.get(name) is not True]
    if unchecked:
        _reject(Outcome.INVALID, f"Checklist incomplete: {len(unchecked)} item(s) not done")
    return {name: True for name in CLEANING_ITEMS}


def submit_cleaning_checklist(cabin_id: str, items: dict, operator: User) -> WorkflowResult:
    """
    Record a completed housekeeping checklist.

    The cabin status does not change; the checklist shows up as the cabin's
    pending cleaning on the next read.
    """
    def _op():
        _require_action(operator, "SUBMIT_CLEANING")
        checked_items = _validate_checklist_items(items)

        cabin = _load_cabin(cabin_id)
        if not is_admin(operator.role):
            if cabin.status != CabinStatus.EMPTY_DIRTY:
                _reject(Outcome.INVALID, f"{cabin.name} is {cabin.status}; cleaning needs EMPTY_DIRTY")
            if entity_store.has_pending_checklist(cabin.id):
                _reject(Outcome.INVALID, f"{cabin.name} already has a checklist awaiting approval")

        checklist = CleaningChecklist(
            cabin_id=cabin.id,
            items=checked_items,
            filled_by_user_id=operator.id,
            status=ChecklistStatus.SUBMITTED,
            created_at=utcnow(),
        )
        entity_store.stage(checklist)

        message = f"{cabin.name}: cleaning checklist submitted"
        audit_service.record_action(operator, "SUBMIT_CLEANING", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, checklist.id)

    return _execute("SUBMIT_CLEANING", operator, _op)


def approve_cleaning_checklist(checklist_id: str, operator: User) -> WorkflowResult:
    """
    Approve a submitted checklist and mark its cabin EMPTY_CLEAN.

    Approval happens once: a second attempt is INVALID and leaves the
    approver and approval time as they were.
    """
    def _op():
        _require_action(operator, "APPROVE_CLEANING")

        checklist = entity_store.get_checklist_for_update(checklist_id)
        if not checklist:
            _reject(Outcome.NOT_FOUND, f"Checklist {checklist_id} not found")
        if checklist.status == ChecklistStatus.APPROVED:
            _reject(Outcome.INVALID, "Checklist is already approved")

        cabin = _load_cabin(checklist.cabin_id)
        if cabin.status != CabinStatus.EMPTY_DIRTY and not is_admin(operator.role):
            _reject(Outcome.INVALID, f"{cabin.name} is {cabin.status}; approval needs EMPTY_DIRTY")

        checklist.status = ChecklistStatus.APPROVED
        checklist.approved_by_user_id = operator.id
        checklist.approved_at = utcnow()
        cabin.status = CabinStatus.EMPTY_CLEAN

        message = f"{cabin.name}: cleaning approved, cabin ready"
        audit_service.record_action(operator, "APPROVE_CLEANING", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, checklist_id)

    return _execute("APPROVE_CLEANING", operator, _op)


def get_cleaning_checklist(checklist_id: str, operator: User) -> WorkflowResult:
    """Read one checklist; the entity is returned in `payload`."""
    role = operator.role if operator is not None else None
    if not is_action_permitted(role, "VIEW_CLEANING"):
        current_app.logger.warning("Forbidden VIEW_CLEANING by %s", operator.username if operator else None)
        return WorkflowResult(Outcome.FORBIDDEN, f"Role {role} may not view cleaning checklists")

    checklist = entity_store.get_checklist(checklist_id)
    if checklist is None:
        return WorkflowResult(Outcome.NOT_FOUND, f"Checklist {checklist_id} not found")
    return WorkflowResult(Outcome.OK, "", checklist_id, payload=checklist)


# ================================================================================
# USERS (ADMIN only)
# ================================================================================

def add_user(username: str, password: str, role: str, operator: User) -> WorkflowResult:
    def _op():
        _require_action(operator, "ADD_USER")
        name = (username or "").strip()
        if name and entity_store.find_user_by_username(name) is not None:
            _reject(Outcome.CONFLICT, f"Username '{name}' already exists")
        try:
            user = build_user(name, password, role)
        except (ValueError, PasswordValidationError) as exc:
            _reject(Outcome.INVALID, str(exc))

        entity_store.stage(user)
        message = f"User {user.username} added with role {user.role}"
        audit_service.record_action(operator, "ADD_USER", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, user.id)

    return _execute("ADD_USER", operator, _op)


def update_user(
    user_id: str,
    operator: User,
    username: str | None = None,
    password: str | None = None,
    role: str | None = None,
) -> WorkflowResult:
    """Change any of username, password and role. References to the user are id-keyed."""
    def _op():
        _require_action(operator, "UPDATE_USER")

        user = entity_store.get_user_row(user_id)
        if not user:
            _reject(Outcome.NOT_FOUND, f"User {user_id} not found")

        old_username = user.username
        changes = []

        if username is not None:
            new_username = username.strip()
            if not new_username:
                _reject(Outcome.INVALID, "Username is required")
            if new_username != old_username:
                existing = entity_store.find_user_by_username(new_username)
                if existing is not None and existing.id != user.id:
                    _reject(Outcome.CONFLICT, f"Username '{new_username}' already exists")
                user.username = new_username
                changes.append(f"renamed to {new_username}")

        if role is not None and role != user.role:
            try:
                validate_role(role)
            except ValueError as exc:
                _reject(Outcome.INVALID, str(exc))
            user.role = role
            changes.append(f"role set to {role}")

        if password:
            try:
                user.password_hash = hash_password(password)
            except PasswordValidationError as exc:
                _reject(Outcome.INVALID, str(exc))
            changes.append("password changed")

        summary = ", ".join(changes) if changes else "no changes"
        message = f"User {old_username} updated: {summary}"
        audit_service.record_action(operator, "UPDATE_USER", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, user_id)

    return _execute("UPDATE_USER", operator, _op)


def delete_user(user_id: str, operator: User) -> WorkflowResult:
    """Remove a user. Rows that referenced them render as Unknown/System afterwards."""
    def _op():
        _require_action(operator, "DELETE_USER")
        if operator.id == user_id:
            _reject(Outcome.INVALID, "You cannot delete your own account")

        user = entity_store.get_user_row(user_id)
        if not user:
            _reject(Outcome.NOT_FOUND, f"User {user_id} not found")

        message = f"User {user.username} deleted"
        entity_store.remove(user)
        audit_service.record_action(operator, "DELETE_USER", message)

        entity_store.commit()
        return WorkflowResult(Outcome.OK, message, user_id)

    return _execute("DELETE_USER", operator, _op)
