# Overview: Domain enumerations and fixed deployment data (cabins, checklist items, labels).

from __future__ import annotations


class Role:
    """User roles. Stored as text in users.role (check constraint)."""
    ADMIN = "ADMIN"
    RECEPTION = "RECEPTION"
    HOUSEKEEPING = "HOUSEKEEPING"
    TECHNICAL = "TECHNICAL"


class CabinStatus:
    """Cabin lifecycle states. Stored as text in cabins.status (check constraint)."""
    OCCUPIED = "OCCUPIED"
    EMPTY_DIRTY = "EMPTY_DIRTY"
    EMPTY_CLEAN = "EMPTY_CLEAN"
    ISSUE_TECH = "ISSUE_TECH"
    ISSUE_CLEAN = "ISSUE_CLEAN"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"


class IssueType:
    TECHNICAL = "TECHNICAL"
    CLEANING = "CLEANING"


class IssueStatus:
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


class ChecklistStatus:
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"


VALID_ROLES = (Role.ADMIN, Role.RECEPTION, Role.HOUSEKEEPING, Role.TECHNICAL)

VALID_CABIN_STATUSES = (
    CabinStatus.OCCUPIED,
    CabinStatus.EMPTY_DIRTY,
    CabinStatus.EMPTY_CLEAN,
    CabinStatus.ISSUE_TECH,
    CabinStatus.ISSUE_CLEAN,
    CabinStatus.UNDER_MAINTENANCE,
)

# Statuses that carry an open issue
ISSUE_STATUSES = frozenset({
    CabinStatus.ISSUE_TECH,
    CabinStatus.ISSUE_CLEAN,
    CabinStatus.UNDER_MAINTENANCE,
})

VALID_ISSUE_STATUSES = (IssueStatus.OPEN, IssueStatus.IN_PROGRESS, IssueStatus.RESOLVED)
VALID_CHECKLIST_STATUSES = (ChecklistStatus.SUBMITTED, ChecklistStatus.APPROVED)

# Issue type -> cabin status; any other type maps to UNDER_MAINTENANCE
ISSUE_TYPE_STATUS = {
    IssueType.TECHNICAL: CabinStatus.ISSUE_TECH,
    IssueType.CLEANING: CabinStatus.ISSUE_CLEAN,
}


def status_for_issue_type(issue_type: str) -> str:
    return ISSUE_TYPE_STATUS.get(issue_type, CabinStatus.UNDER_MAINTENANCE)


# The fixed set of cabins provisioned for this deployment: (name, icon)
CABIN_DEFINITIONS = [
    ("Shoka", "Mountain"),
    ("Michka", "Bird"),
    ("Papli", "Flower"),
    ("Opach", "Cloud"),
    ("Zik", "Feather"),
    ("Sorkhdar", "TreePine"),
    ("Shemshad", "TreeDeciduous"),
    ("Maral", "Crown"),
    ("Namazin", "Sun"),
]

DEFAULT_CABIN_ICON = "Home"


def icon_for_cabin(name: str) -> str:
    for cabin_name, icon in CABIN_DEFINITIONS:
        if cabin_name == name:
            return icon
    return DEFAULT_CABIN_ICON


# Housekeeping checklist; every item must be checked before submission
CLEANING_ITEMS = [
    "Dishes washed and sink cleaned",
    "Dish soap and hand soap refilled",
    "Bathroom and fixtures washed",
    "Waste bins emptied",
    "Bedspreads, pillowcases and bedding checked",
    "No cobwebs (ceiling and bathroom)",
    "Cabin smells fresh",
    "Cabin dishes and fridge restocked",
    "Stock: matches, tea, sheets, salt, pepper",
    "Sofa, carpet and floor cleaned",
    "Curtains and windows cleaned",
    "Fridge cleaned and free of frost",
    "Full dusting (TV, table, mirror)",
    "Slippers and shoe rack cleaned",
    "Firewood, charcoal and fuel topped up",
    "Yard, kettle, teapot and barbecue cleaned",
]

ROLE_LABELS = {
    Role.ADMIN: "System administrator",
    Role.RECEPTION: "Reception",
    Role.HOUSEKEEPING: "Housekeeping",
    Role.TECHNICAL: "Facilities / technical",
}

STATUS_LABELS = {
    CabinStatus.OCCUPIED: "Occupied (guests in)",
    CabinStatus.EMPTY_DIRTY: "Empty (not cleaned)",
    CabinStatus.EMPTY_CLEAN: "Empty (ready)",
    CabinStatus.ISSUE_TECH: "Technical issue",
    CabinStatus.ISSUE_CLEAN: "Cleaning issue",
    CabinStatus.UNDER_MAINTENANCE: "Under review",
}
