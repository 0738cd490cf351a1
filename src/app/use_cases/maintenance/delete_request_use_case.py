"""
Use Case: Delete Maintenance Request

Hard delete: the request and its whole update log are removed together.
There is no tombstone and no restore.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import NotFoundError, StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import DeleteMaintenanceRequestResponse

logger = logging.getLogger(__name__)


class DeleteMaintenanceRequestUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, request_id: Optional[str]
    ) -> Result[DeleteMaintenanceRequestResponse]:
        error = require_fields(request_id=request_id)
        if error:
            return Return.err(error)

        async with self.uow:
            try:
                deleted = await self.uow.maintenance_requests.delete(request_id)
                if not deleted:
                    return Return.err(NotFoundError())

                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.exception("Failed to delete maintenance request %s", request_id)
                return Return.err(StorageError(reason=str(exc)))

        logger.info("Deleted maintenance request %s", request_id)
        return Return.ok(
            DeleteMaintenanceRequestResponse(request_id=request_id, status="deleted")
        )
