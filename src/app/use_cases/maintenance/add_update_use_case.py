"""
Use Case: Add Maintenance Update

Appends an entry to the update log of an existing maintenance request.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.repositories.maintenance_request_repository import ConcurrentModificationError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import MaintenanceUpdate
from src.domain.errors import ConflictError, NotFoundError, StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import AddMaintenanceUpdateCommand, MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class AddMaintenanceUpdateUseCase:
    """
    Append an update to a maintenance request.

    Business Logic:
    1. Validate request_id, updated_by and description are present
    2. Stamp the entry with the server time
    3. Append it to the end of the log (version compare-and-set, so a
       concurrent append is retried instead of overwritten)
    4. Commit

    Existing entries are never modified or reordered.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: AddMaintenanceUpdateCommand
    ) -> Result[MaintenanceRequestResponse]:
        """
        Execute add maintenance update use case.

        Returns:
            Result[MaintenanceRequestResponse] with the full updated request

        Errors:
            - VALIDATION_ERROR: a required field is missing
            - REQUEST_NOT_FOUND: no request with this ID (nothing is written)
            - CONCURRENT_MODIFICATION: retries exhausted under contention
            - STORAGE_ERROR: the database write failed
        """
        error = require_fields(
            request_id=command.request_id,
            updated_by=command.updated_by,
            description=command.description,
        )
        if error:
            return Return.err(error)

        maintenance_update = MaintenanceUpdate(
            updated_by=command.updated_by,
            description=command.description,
        )

        async with self.uow:
            try:
                request = await self.uow.maintenance_requests.append_update(
                    command.request_id, maintenance_update
                )
                if request is None:
                    return Return.err(NotFoundError())

                response = MaintenanceRequestResponse.from_entity(request)

                await self.uow.commit()
            except ConcurrentModificationError as exc:
                return Return.err(ConflictError(str(exc), code="CONCURRENT_MODIFICATION"))
            except SQLAlchemyError as exc:
                logger.exception("Failed to append update to %s", command.request_id)
                return Return.err(StorageError(reason=str(exc)))

        logger.info(
            "Appended update by %s to maintenance request %s",
            command.updated_by,
            command.request_id,
        )
        return Return.ok(response)
