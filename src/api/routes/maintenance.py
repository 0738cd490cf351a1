"""
Maintenance API Routes

Thin handlers over the maintenance use cases. Every route requires a
bearer token issued by the identity service.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.maintenance import (
    AddMaintenanceUpdateCommand,
    AddMaintenanceUpdateUseCase,
    AssignContractorCommand,
    AssignContractorUseCase,
    ChangeStatusCommand,
    ChangeStatusUseCase,
    CreateMaintenanceRequestCommand,
    CreateMaintenanceRequestUseCase,
    DeleteMaintenanceRequestResponse,
    DeleteMaintenanceRequestUseCase,
    GetMaintenanceRequestUseCase,
    ListPropertyRequestsUseCase,
    MaintenanceRequestListResponse,
    MaintenanceRequestResponse,
)
from src.depends import get_current_user, get_status_policy, get_unit_of_work
from src.domain.status_transitions import StatusTransitionPolicy

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


class CreateMaintenanceRequestRequest(BaseModel):
    """POST /maintenance request payload"""

    property_id: Optional[str] = Field(None, description="Property the issue is in")
    tenant_id: Optional[str] = Field(None, description="Tenant raising the request")
    description: Optional[str] = Field(None, description="Description of the issue")
    request_id: Optional[str] = Field(
        None, description="Explicit request ID (generated when omitted)"
    )


class AddMaintenanceUpdateRequest(BaseModel):
    """PUT /maintenance/update request payload"""

    request_id: Optional[str] = Field(None, description="Request to update")
    updated_by: Optional[str] = Field(
        None, description="Acting user (defaults to the token's user_id)"
    )
    description: Optional[str] = Field(None, description="Update text")


class AssignContractorRequest(BaseModel):
    """PUT /maintenance/assign request payload"""

    request_id: Optional[str] = Field(None, description="Request to assign")
    contractor_id: Optional[str] = Field(None, description="Contractor or company ID")


class ChangeStatusRequest(BaseModel):
    """PATCH /maintenance/{request_id}/status request payload"""

    status: Optional[str] = Field(None, description="Open, In Progress or Closed")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MaintenanceRequestResponse,
)
async def create_maintenance_request(
    request: CreateMaintenanceRequestRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Maintenance Request

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 409 Conflict: REQUEST_ID_CONFLICT
        - 500 Internal Server Error: STORAGE_ERROR
    """
    command = CreateMaintenanceRequestCommand(
        property_id=request.property_id,
        tenant_id=request.tenant_id,
        description=request.description,
        request_id=request.request_id,
    )

    use_case = CreateMaintenanceRequestUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put(
    "/update",
    status_code=status.HTTP_200_OK,
    response_model=MaintenanceRequestResponse,
)
async def add_maintenance_update(
    request: AddMaintenanceUpdateRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Add Maintenance Update

    Appends an entry to the request's update log. When updated_by is
    omitted, the authenticated user is recorded.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 404 Not Found: REQUEST_NOT_FOUND
        - 409 Conflict: CONCURRENT_MODIFICATION
        - 500 Internal Server Error: STORAGE_ERROR
    """
    command = AddMaintenanceUpdateCommand(
        request_id=request.request_id,
        updated_by=request.updated_by or current_user.get("user_id"),
        description=request.description,
    )

    use_case = AddMaintenanceUpdateUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put(
    "/assign",
    status_code=status.HTTP_200_OK,
    response_model=MaintenanceRequestResponse,
)
async def assign_contractor(
    request: AssignContractorRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Assign Contractor

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 404 Not Found: REQUEST_NOT_FOUND
        - 500 Internal Server Error: STORAGE_ERROR
    """
    command = AssignContractorCommand(
        request_id=request.request_id,
        contractor_id=request.contractor_id,
    )

    use_case = AssignContractorUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/property/{property_id}",
    status_code=status.HTTP_200_OK,
    response_model=MaintenanceRequestListResponse,
)
async def list_property_requests(
    property_id: str,
    active_only: bool = Query(False, description="Only Open and In Progress requests"),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Maintenance Requests for a Property

    An empty list is a normal 200 response.
    """
    use_case = ListPropertyRequestsUseCase(uow)
    result = await use_case.execute(property_id, active_only=active_only)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{request_id}",
    status_code=status.HTTP_200_OK,
    response_model=MaintenanceRequestResponse,
)
async def get_maintenance_request(
    request_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Maintenance Request

    Raises:
        - 404 Not Found: REQUEST_NOT_FOUND
    """
    use_case = GetMaintenanceRequestUseCase(uow)
    result = await use_case.execute(request_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.patch(
    "/{request_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=MaintenanceRequestResponse,
)
async def change_status(
    request_id: str,
    request: ChangeStatusRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: StatusTransitionPolicy = Depends(get_status_policy),
):
    """
    Change Maintenance Request Status

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_STATUS_TRANSITION
        - 404 Not Found: REQUEST_NOT_FOUND
        - 409 Conflict: CONCURRENT_MODIFICATION
        - 500 Internal Server Error: STORAGE_ERROR
    """
    command = ChangeStatusCommand(request_id=request_id, status=request.status)

    use_case = ChangeStatusUseCase(uow, policy=policy)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeleteMaintenanceRequestResponse,
)
async def delete_maintenance_request(
    request_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Maintenance Request

    Hard delete of the request and its update log.

    Raises:
        - 404 Not Found: REQUEST_NOT_FOUND
        - 500 Internal Server Error: STORAGE_ERROR
    """
    use_case = DeleteMaintenanceRequestUseCase(uow)
    result = await use_case.execute(request_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
