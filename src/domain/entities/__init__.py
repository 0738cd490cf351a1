"""
Maintenance Service Domain Entities

The maintenance request aggregate and its embedded update log.
"""

from .enums import MaintenanceStatus
from .maintenance_request import (
    MaintenanceRequest,
    MaintenanceUpdate,
    generate_request_id,
)

__all__ = [
    # Enums
    "MaintenanceStatus",
    # Entities
    "MaintenanceRequest",
    "MaintenanceUpdate",
    "generate_request_id",
]
