"""
Status transition policy for maintenance requests.

Storage accepts any status at any time. When enforcement is switched on
(ENFORCE_STATUS_TRANSITIONS), requests only move forward:
Open -> In Progress -> Closed, with Open -> Closed allowed as a shortcut.
Nothing leaves Closed.
"""

from typing import Dict, FrozenSet

from src.domain.entities.enums import MaintenanceStatus

ALLOWED_TRANSITIONS: Dict[MaintenanceStatus, FrozenSet[MaintenanceStatus]] = {
    MaintenanceStatus.open: frozenset(
        {MaintenanceStatus.open, MaintenanceStatus.in_progress, MaintenanceStatus.closed}
    ),
    MaintenanceStatus.in_progress: frozenset(
        {MaintenanceStatus.in_progress, MaintenanceStatus.closed}
    ),
    MaintenanceStatus.closed: frozenset({MaintenanceStatus.closed}),
}


class StatusTransitionPolicy:
    """Decides whether a status change is allowed"""

    def __init__(self, enforce: bool = False):
        self.enforce = enforce

    def is_allowed(self, current: MaintenanceStatus, target: MaintenanceStatus) -> bool:
        if not self.enforce:
            return True
        return target in ALLOWED_TRANSITIONS[MaintenanceStatus(current)]
