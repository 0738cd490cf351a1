"""
Use Case: Create Maintenance Request

Opens a new maintenance request for a property on behalf of a tenant.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import MaintenanceRequest, MaintenanceStatus, generate_request_id
from src.domain.errors import ConflictError, StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import CreateMaintenanceRequestCommand, MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class CreateMaintenanceRequestUseCase:
    """
    Create a maintenance request.

    Business Logic:
    1. Validate property_id, tenant_id and description are present
    2. Use the supplied request_id, or derive one from property, tenant
       and the creation instant
    3. Reject the request if the ID is already taken
    4. Insert with status=Open, no updates, no contractor
    5. Commit
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: CreateMaintenanceRequestCommand
    ) -> Result[MaintenanceRequestResponse]:
        """
        Execute create maintenance request use case.

        Args:
            command: CreateMaintenanceRequestCommand

        Returns:
            Result[MaintenanceRequestResponse] with the stored request

        Errors:
            - VALIDATION_ERROR: a required field is missing
            - REQUEST_ID_CONFLICT: the request ID already exists
            - STORAGE_ERROR: the database write failed
        """
        error = require_fields(
            property_id=command.property_id,
            tenant_id=command.tenant_id,
            description=command.description,
        )
        if error:
            return Return.err(error)

        created_at = utc_now()
        request_id = (command.request_id or "").strip() or generate_request_id(
            command.property_id, command.tenant_id, created_at
        )

        async with self.uow:
            try:
                existing = await self.uow.maintenance_requests.get_by_request_id(request_id)
                if existing:
                    return Return.err(
                        ConflictError(f"Maintenance request {request_id} already exists")
                    )

                request = MaintenanceRequest(
                    request_id=request_id,
                    property_id=command.property_id,
                    tenant_id=command.tenant_id,
                    description=command.description,
                    status=MaintenanceStatus.open,
                    assigned_to=None,
                    updates=[],
                    created_at=created_at,
                )
                request = await self.uow.maintenance_requests.create(request)

                response = MaintenanceRequestResponse.from_entity(request)

                await self.uow.commit()
            except IntegrityError as exc:
                # Lost a race against another insert with the same ID
                return Return.err(
                    ConflictError(
                        f"Maintenance request {request_id} already exists",
                        reason=str(exc.orig),
                    )
                )
            except SQLAlchemyError as exc:
                logger.exception("Failed to create maintenance request %s", request_id)
                return Return.err(StorageError(reason=str(exc)))

        logger.info(
            "Created maintenance request %s for property %s",
            request_id,
            command.property_id,
        )
        return Return.ok(response)
