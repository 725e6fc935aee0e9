from .auth import User
from .cabins import Cabin, Stay
from .issues import Issue
from .cleaning import CleaningChecklist
from .audit import LogEntry, Notification

__all__ = [
    'User',
    'Cabin', 'Stay',
    'Issue',
    'CleaningChecklist',
    'LogEntry', 'Notification',
]
