# Overview: Role policy package.
# Re-exports all public APIs.

from .categories import ActionCategory
from .definitions import (
    ACTION_DEFINITIONS,
    CABIN_ACTIONS,
    ISSUE_ACTIONS,
    CLEANING_ACTIONS,
    USER_ACTIONS,
    SYSTEM_ACTIONS,
)
from .roles import DEFAULT_ROLE_PERMISSIONS
from .helpers import (
    get_all_action_codes,
    get_actions_by_category,
    get_action_definition,
    validate_action_code,
    roles_for_action,
)
from .policy import (
    has_role,
    is_admin,
    get_role_actions,
    is_action_permitted,
    is_transition_permitted,
    can_resolve_issue_type,
    available_actions,
)

__all__ = [
    "ActionCategory",
    "ACTION_DEFINITIONS",
    "CABIN_ACTIONS",
    "ISSUE_ACTIONS",
    "CLEANING_ACTIONS",
    "USER_ACTIONS",
    "SYSTEM_ACTIONS",
    "DEFAULT_ROLE_PERMISSIONS",
    "get_all_action_codes",
    "get_actions_by_category",
    "get_action_definition",
    "validate_action_code",
    "roles_for_action",
    "has_role",
    "is_admin",
    "get_role_actions",
    "is_action_permitted",
    "is_transition_permitted",
    "can_resolve_issue_type",
    "available_actions",
]
