# Overview: Utility functions for action lookups and validation.

from .definitions import ACTION_DEFINITIONS
from .roles import DEFAULT_ROLE_PERMISSIONS


def get_all_action_codes():
    """Get list of all action codes."""
    return [action[0] for action in ACTION_DEFINITIONS]


def get_actions_by_category(category):
    """Get all actions in a category."""
    return [action for action in ACTION_DEFINITIONS if action[3] == category]


def get_action_definition(code):
    """Get full definition for an action code."""
    for action in ACTION_DEFINITIONS:
        if action[0] == code:
            return {
                "code": action[0],
                "name": action[1],
                "description": action[2],
                "category": action[3],
            }
    return None


def validate_action_code(code):
    """Check if an action code is valid."""
    return code in get_all_action_codes()


def roles_for_action(code):
    """Roles granted `code` by default."""
    return {role for role, codes in DEFAULT_ROLE_PERMISSIONS.items() if code in codes}
