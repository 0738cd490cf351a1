"""
Use Case: Change Maintenance Request Status

Moves a request between Open, In Progress and Closed.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.app.repositories.maintenance_request_repository import ConcurrentModificationError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import MaintenanceStatus
from src.domain.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
    require_fields,
)
from src.domain.status_transitions import StatusTransitionPolicy
from src.libs.result import Result, Return

from .dtos import ChangeStatusCommand, MaintenanceRequestResponse

logger = logging.getLogger(__name__)


class ChangeStatusUseCase:
    """
    Change the status of a maintenance request.

    Business Logic:
    1. Validate the target status is one of Open, In Progress, Closed
    2. Load the request
    3. Ask the transition policy (permissive unless enforcement is enabled)
    4. Write the new status only if the stored status is still the one we read
    5. Commit
    """

    def __init__(self, uow: UnitOfWork, policy: Optional[StatusTransitionPolicy] = None):
        self.uow = uow
        self.policy = policy or StatusTransitionPolicy()

    async def execute(self, command: ChangeStatusCommand) -> Result[MaintenanceRequestResponse]:
        """
        Errors:
            - VALIDATION_ERROR: missing field or unknown status value
            - INVALID_STATUS_TRANSITION: refused by the transition policy
            - REQUEST_NOT_FOUND: no request with this ID
            - CONCURRENT_MODIFICATION: status changed between read and write
            - STORAGE_ERROR: the database write failed
        """
        error = require_fields(request_id=command.request_id, status=command.status)
        if error:
            return Return.err(error)

        try:
            target = MaintenanceStatus(command.status)
        except ValueError:
            allowed = ", ".join(s.value for s in MaintenanceStatus)
            return Return.err(
                ValidationError(f"Invalid status '{command.status}'. Must be one of: {allowed}")
            )

        async with self.uow:
            try:
                request = await self.uow.maintenance_requests.get_by_request_id(
                    command.request_id
                )
                if request is None:
                    return Return.err(NotFoundError())

                current = MaintenanceStatus(request.status)
                if not self.policy.is_allowed(current, target):
                    return Return.err(
                        ValidationError(
                            f"Cannot move request from {current.value} to {target.value}",
                            code="INVALID_STATUS_TRANSITION",
                        )
                    )

                request = await self.uow.maintenance_requests.change_status(
                    command.request_id, target, expected_status=current
                )
                if request is None:
                    return Return.err(NotFoundError())

                response = MaintenanceRequestResponse.from_entity(request)

                await self.uow.commit()
            except ConcurrentModificationError as exc:
                return Return.err(ConflictError(str(exc), code="CONCURRENT_MODIFICATION"))
            except SQLAlchemyError as exc:
                logger.exception("Failed to change status of %s", command.request_id)
                return Return.err(StorageError(reason=str(exc)))

        logger.info(
            "Maintenance request %s moved from %s to %s",
            command.request_id,
            current.value,
            target.value,
        )
        return Return.ok(response)
