# Overview: Action category constants for grouping related permissions.


class ActionCategory:
    """Action categories for organization and UI display."""
    CABINS = "CABINS"
    ISSUES = "ISSUES"
    CLEANING = "CLEANING"
    USERS = "USERS"
    SYSTEM = "SYSTEM"
