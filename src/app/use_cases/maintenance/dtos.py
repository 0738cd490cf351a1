"""
Maintenance Use Case DTOs (Data Transfer Objects)

Command and Response classes for the maintenance request domain.
Commands carry raw caller input; the use cases validate it so that a
missing field comes back as a VALIDATION_ERROR result, not an exception.
"""

from typing import List, Optional

from pydantic import BaseModel

from src.domain.base import format_timestamp
from src.domain.entities import MaintenanceRequest


# ============================================================================
# Command DTOs
# ============================================================================


class CreateMaintenanceRequestCommand(BaseModel):
    """Create a new maintenance request; request_id is generated when omitted"""

    property_id: Optional[str] = None
    tenant_id: Optional[str] = None
    description: Optional[str] = None
    request_id: Optional[str] = None


class AddMaintenanceUpdateCommand(BaseModel):
    """Append an entry to a request's update log"""

    request_id: Optional[str] = None
    updated_by: Optional[str] = None
    description: Optional[str] = None


class AssignContractorCommand(BaseModel):
    """Assign (or reassign) a contractor to a request"""

    request_id: Optional[str] = None
    contractor_id: Optional[str] = None


class ChangeStatusCommand(BaseModel):
    """Move a request to another status"""

    request_id: Optional[str] = None
    status: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class MaintenanceUpdateInfo(BaseModel):
    """One entry of the update log"""

    updated_by: str
    description: str
    timestamp: str


class MaintenanceRequestResponse(BaseModel):
    """Public shape of a maintenance request"""

    request_id: str
    property_id: str
    tenant_id: str
    description: str
    status: str
    assigned_to: Optional[str]
    created_at: str
    updates: List[MaintenanceUpdateInfo]

    @classmethod
    def from_entity(cls, request: MaintenanceRequest) -> "MaintenanceRequestResponse":
        return cls(
            request_id=request.request_id,
            property_id=request.property_id,
            tenant_id=request.tenant_id,
            description=request.description,
            status=getattr(request.status, "value", request.status),
            assigned_to=request.assigned_to,
            created_at=format_timestamp(request.created_at),
            updates=[
                MaintenanceUpdateInfo(**entry.to_document())
                for entry in request.update_entries()
            ],
        )


class MaintenanceRequestListResponse(BaseModel):
    """Requests for one property"""

    property_id: str
    active_only: bool
    count: int
    requests: List[MaintenanceRequestResponse]


class DeleteMaintenanceRequestResponse(BaseModel):
    """Response for delete maintenance request use case"""

    request_id: str
    status: str
