# Overview: All action definitions organized by category.
# Each action is defined as: (code, name, description, category)
# Mutating action codes double as the audit log action tag.

from .categories import ActionCategory


# -- CABINS --

CABIN_ACTIONS = [
    (
        "CHANGE_STATUS",
        "Change Cabin Status",
        "Move a cabin along its lifecycle (checkout, technical fix confirmed)",
        ActionCategory.CABINS,
    ),
    (
        "OVERRIDE_STATUS",
        "Override Cabin Status",
        "Force any cabin status, bypassing preconditions",
        ActionCategory.CABINS,
    ),
    (
        "CHECK_IN",
        "Check In",
        "Register a stay and mark a ready cabin as occupied",
        ActionCategory.CABINS,
    ),
]


# -- ISSUES --

ISSUE_ACTIONS = [
    (
        "REPORT_ISSUE",
        "Report Issue",
        "Report a technical or cleaning problem in a cabin",
        ActionCategory.ISSUES,
    ),
    (
        "RESOLVE_ISSUE",
        "Resolve Issue",
        "Mark a reported issue as resolved",
        ActionCategory.ISSUES,
    ),
]


# -- CLEANING --

CLEANING_ACTIONS = [
    (
        "SUBMIT_CLEANING",
        "Submit Cleaning Checklist",
        "Submit a completed housekeeping checklist for a vacated cabin",
        ActionCategory.CLEANING,
    ),
    (
        "APPROVE_CLEANING",
        "Approve Cleaning Checklist",
        "Confirm a submitted checklist and mark the cabin ready",
        ActionCategory.CLEANING,
    ),
    (
        "VIEW_CLEANING",
        "View Cleaning Checklist",
        "Open a submitted or approved checklist",
        ActionCategory.CLEANING,
    ),
]


# -- USERS --

USER_ACTIONS = [
    (
        "VIEW_USERS",
        "View Users",
        "List staff accounts",
        ActionCategory.USERS,
    ),
    (
        "ADD_USER",
        "Add User",
        "Create staff accounts",
        ActionCategory.USERS,
    ),
    (
        "UPDATE_USER",
        "Update User",
        "Edit username, password or role of a staff account",
        ActionCategory.USERS,
    ),
    (
        "DELETE_USER",
        "Delete User",
        "Remove staff accounts",
        ActionCategory.USERS,
    ),
]


# -- SYSTEM --

SYSTEM_ACTIONS = [
    (
        "VIEW_LOGS",
        "View Audit Log",
        "Read the audit trail of state-changing actions",
        ActionCategory.SYSTEM,
    ),
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "Read occupancy counts and upcoming checkouts",
        ActionCategory.SYSTEM,
    ),
]


ACTION_DEFINITIONS = (
    CABIN_ACTIONS
    + ISSUE_ACTIONS
    + CLEANING_ACTIONS
    + USER_ACTIONS
    + SYSTEM_ACTIONS
)
