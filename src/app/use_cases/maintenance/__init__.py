"""
Maintenance Use Cases

Lifecycle operations on the maintenance request aggregate.
"""

from .create_request_use_case import CreateMaintenanceRequestUseCase
from .add_update_use_case import AddMaintenanceUpdateUseCase
from .assign_contractor_use_case import AssignContractorUseCase
from .change_status_use_case import ChangeStatusUseCase
from .delete_request_use_case import DeleteMaintenanceRequestUseCase
from .get_request_use_case import GetMaintenanceRequestUseCase
from .list_property_requests_use_case import ListPropertyRequestsUseCase
from .dtos import (
    AddMaintenanceUpdateCommand,
    AssignContractorCommand,
    ChangeStatusCommand,
    CreateMaintenanceRequestCommand,
    DeleteMaintenanceRequestResponse,
    MaintenanceRequestListResponse,
    MaintenanceRequestResponse,
    MaintenanceUpdateInfo,
)

__all__ = [
    # Use Cases
    "CreateMaintenanceRequestUseCase",
    "AddMaintenanceUpdateUseCase",
    "AssignContractorUseCase",
    "ChangeStatusUseCase",
    "DeleteMaintenanceRequestUseCase",
    "GetMaintenanceRequestUseCase",
    "ListPropertyRequestsUseCase",
    # DTOs - Commands
    "CreateMaintenanceRequestCommand",
    "AddMaintenanceUpdateCommand",
    "AssignContractorCommand",
    "ChangeStatusCommand",
    # DTOs - Responses
    "MaintenanceRequestResponse",
    "MaintenanceRequestListResponse",
    "DeleteMaintenanceRequestResponse",
    "MaintenanceUpdateInfo",
]
