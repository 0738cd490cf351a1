"""
Use Case: List Maintenance Requests by Property
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import MaintenanceRequestListResponse, MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class ListPropertyRequestsUseCase:
    """
    Retrieve all maintenance requests for a property.

    Business Rules:
    - active_only restricts results to Open and In Progress requests
    - Results ordered oldest first
    - No matches is a successful empty list, not a not-found error
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, property_id: Optional[str], active_only: bool = False
    ) -> Result[MaintenanceRequestListResponse]:
        error = require_fields(property_id=property_id)
        if error:
            return Return.err(error)

        async with self.uow:
            try:
                requests = await self.uow.maintenance_requests.list_by_property(
                    property_id, active_only=active_only
                )
            except SQLAlchemyError as exc:
                logger.exception("Failed to list maintenance requests for %s", property_id)
                return Return.err(StorageError(reason=str(exc)))

            return Return.ok(
                MaintenanceRequestListResponse(
                    property_id=property_id,
                    active_only=active_only,
                    count=len(requests),
                    requests=[MaintenanceRequestResponse.from_entity(r) for r in requests],
                )
            )
