# Overview: Default action grants per role.

from ..constants import Role
from .definitions import ACTION_DEFINITIONS


# ADMIN is a superset of every other role.
DEFAULT_ROLE_PERMISSIONS = {
    Role.ADMIN: {action[0] for action in ACTION_DEFINITIONS},
    Role.RECEPTION: {
        "CHANGE_STATUS",
        "CHECK_IN",
        "REPORT_ISSUE",
        "APPROVE_CLEANING",
        "VIEW_CLEANING",
        "VIEW_DASHBOARD",
    },
    Role.HOUSEKEEPING: {
        "REPORT_ISSUE",
        "SUBMIT_CLEANING",
        "VIEW_CLEANING",
        "VIEW_DASHBOARD",
    },
    Role.TECHNICAL: {
        "CHANGE_STATUS",
        "REPORT_ISSUE",
        "RESOLVE_ISSUE",
        "VIEW_DASHBOARD",
    },
}
