"""
Use Case: Assign Contractor

Assigns a maintenance request to a contractor or company.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import NotFoundError, StorageError, require_fields
from src.libs.result import Result, Return

from .dtos import AssignContractorCommand, MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class AssignContractorUseCase:
    """
    Assign a contractor to a maintenance request.

    Overwrites any previous assignment. Re-assigning the same contractor
    still performs a write. Status and update log are left untouched.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: AssignContractorCommand
    ) -> Result[MaintenanceRequestResponse]:
        error = require_fields(
            request_id=command.request_id,
            contractor_id=command.contractor_id,
        )
        if error:
            return Return.err(error)

        async with self.uow:
            try:
                request = await self.uow.maintenance_requests.assign_contractor(
                    command.request_id, command.contractor_id
                )
                if request is None:
                    return Return.err(NotFoundError())

                response = MaintenanceRequestResponse.from_entity(request)

                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.exception("Failed to assign contractor to %s", command.request_id)
                return Return.err(StorageError(reason=str(exc)))

        logger.info(
            "Assigned maintenance request %s to contractor %s",
            command.request_id,
            command.contractor_id,
        )
        return Return.ok(response)
