"""
Maintenance Domain Enums

Enumeration types used by the maintenance request aggregate.
"""

from enum import Enum


class MaintenanceStatus(str, Enum):
    """Maintenance request status"""

    open = "Open"
    in_progress = "In Progress"
    closed = "Closed"

    @classmethod
    def active(cls) -> tuple["MaintenanceStatus", ...]:
        """Statuses counted as active (everything except Closed)"""
        return (cls.open, cls.in_progress)
