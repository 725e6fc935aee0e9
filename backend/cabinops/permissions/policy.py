# Overview: Role policy predicates. Pure functions of (role, action, cabin state).

"""
Role Policy

Consulted by the workflow engine at the start of every operation and by the
HTTP layer to gate reads and to list the actions a user may take on a cabin.

RULES:
- ADMIN holds every action and may force any status transition.
- Holding CHANGE_STATUS is not enough on its own: non-admin roles may only
  drive the transitions listed in ROLE_STATUS_TRANSITIONS.
- TECHNICAL resolves TECHNICAL issues only.
"""

from __future__ import annotations

from ..constants import CabinStatus, IssueType, Role
from .roles import DEFAULT_ROLE_PERMISSIONS
from .helpers import roles_for_action


# (from_status, to_status) pairs a non-admin role may request via CHANGE_STATUS
ROLE_STATUS_TRANSITIONS = {
    Role.RECEPTION: {(CabinStatus.OCCUPIED, CabinStatus.EMPTY_DIRTY)},
    Role.TECHNICAL: {(CabinStatus.ISSUE_TECH, CabinStatus.EMPTY_DIRTY)},
}

# Issue types a non-admin role may resolve
ROLE_RESOLVABLE_ISSUE_TYPES = {
    Role.TECHNICAL: {IssueType.TECHNICAL},
}

# Actions offered on the cabin screen
SCREEN_CHECK_IN = "CHECK_IN"
SCREEN_CHECK_OUT = "CHECK_OUT"
SCREEN_SUBMIT_CLEANING = "SUBMIT_CLEANING"
SCREEN_APPROVE_CLEANING = "APPROVE_CLEANING"
SCREEN_RESOLVE_TECHNICAL = "RESOLVE_TECHNICAL"
SCREEN_REPORT_ISSUE = "REPORT_ISSUE"
SCREEN_OVERRIDE_STATUS = "OVERRIDE_STATUS"


def has_role(role: str | None, permitted_roles) -> bool:
    """True if `role` is one of `permitted_roles`. ADMIN always passes."""
    if role is None:
        return False
    if role == Role.ADMIN:
        return True
    return role in set(permitted_roles)


def is_admin(role: str | None) -> bool:
    return role == Role.ADMIN


def get_role_actions(role: str | None) -> set[str]:
    return set(DEFAULT_ROLE_PERMISSIONS.get(role, set()))


def is_action_permitted(role: str | None, action: str) -> bool:
    return has_role(role, roles_for_action(action))


def is_transition_permitted(role: str | None, from_status: str, to_status: str) -> bool:
    """CHANGE_STATUS gate: ADMIN anything, other roles only their listed transitions."""
    if is_admin(role):
        return True
    if not is_action_permitted(role, "CHANGE_STATUS"):
        return False
    return (from_status, to_status) in ROLE_STATUS_TRANSITIONS.get(role, set())


def can_resolve_issue_type(role: str | None, issue_type: str) -> bool:
    if is_admin(role):
        return True
    if not is_action_permitted(role, "RESOLVE_ISSUE"):
        return False
    return issue_type in ROLE_RESOLVABLE_ISSUE_TYPES.get(role, set())


def available_actions(role: str | None, cabin: dict) -> list[str]:
    """
    Screen actions `role` may take on `cabin` in its current derived state.

    `cabin` is an entity dict from entity_store.get_cabins().
    """
    status = cabin.get("status")
    pending = cabin.get("pending_cleaning_id")
    active_issue = cabin.get("active_issue_id")

    actions: list[str] = []

    if status == CabinStatus.EMPTY_CLEAN and is_action_permitted(role, "CHECK_IN"):
        actions.append(SCREEN_CHECK_IN)

    if status == CabinStatus.OCCUPIED and is_transition_permitted(role, status, CabinStatus.EMPTY_DIRTY):
        actions.append(SCREEN_CHECK_OUT)

    if status == CabinStatus.EMPTY_DIRTY and not pending and is_action_permitted(role, "SUBMIT_CLEANING"):
        actions.append(SCREEN_SUBMIT_CLEANING)

    if (
        pending
        and (status == CabinStatus.EMPTY_DIRTY or is_admin(role))
        and is_action_permitted(role, "APPROVE_CLEANING")
    ):
        actions.append(SCREEN_APPROVE_CLEANING)

    if (
        active_issue
        and status == CabinStatus.ISSUE_TECH
        and can_resolve_issue_type(role, IssueType.TECHNICAL)
        and is_transition_permitted(role, status, CabinStatus.EMPTY_DIRTY)
    ):
        actions.append(SCREEN_RESOLVE_TECHNICAL)

    if not active_issue and is_action_permitted(role, "REPORT_ISSUE"):
        actions.append(SCREEN_REPORT_ISSUE)

    if is_action_permitted(role, "OVERRIDE_STATUS"):
        actions.append(SCREEN_OVERRIDE_STATUS)

    return actions
