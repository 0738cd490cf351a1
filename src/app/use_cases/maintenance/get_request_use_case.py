"""
Use Case: Get Maintenance Request
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import NotFoundError, StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class GetMaintenanceRequestUseCase:
    """Fetch a single maintenance request with its full update log"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, request_id: Optional[str]) -> Result[MaintenanceRequestResponse]:
        error = require_fields(request_id=request_id)
        if error:
            return Return.err(error)

        async with self.uow:
            try:
                request = await self.uow.maintenance_requests.get_by_request_id(request_id)
            except SQLAlchemyError as exc:
                logger.exception("Failed to load maintenance request %s", request_id)
                return Return.err(StorageError(reason=str(exc)))

            if request is None:
                return Return.err(NotFoundError())

            return Return.ok(MaintenanceRequestResponse.from_entity(request))
