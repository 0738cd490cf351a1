import logging
from typing import List, Optional, Tuple

from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.maintenance_request_repository import (
    ConcurrentModificationError,
    IMaintenanceRequestRepository,
)
from src.domain.base import format_timestamp, utc_now
from src.domain.entities import MaintenanceRequest, MaintenanceStatus, MaintenanceUpdate

logger = logging.getLogger(__name__)

DEFAULT_APPEND_MAX_RETRIES = 5


class MaintenanceRequestRepository(IMaintenanceRequestRepository):
    """MaintenanceRequest repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, append_max_retries: int = DEFAULT_APPEND_MAX_RETRIES):
        self.session = session
        self.append_max_retries = append_max_retries

    async def get_by_request_id(self, request_id: str) -> Optional[MaintenanceRequest]:
        """Get maintenance request by request ID"""
        stmt = (
            select(MaintenanceRequest)
            .where(MaintenanceRequest.request_id == request_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, request: MaintenanceRequest) -> MaintenanceRequest:
        """Create a new maintenance request"""
        self.session.add(request)
        await self.session.flush()
        await self.session.refresh(request)
        return request

    async def append_update(
        self, request_id: str, maintenance_update: MaintenanceUpdate
    ) -> Optional[MaintenanceRequest]:
        """
        Append to the embedded log with a version compare-and-set.

        Each attempt reads (version, updates), then writes the extended log
        only if the version is unchanged. A concurrent writer bumps the
        version first, our UPDATE matches no row, and we re-read and retry.
        The entry is stamped on every attempt so a retried append never
        lands behind a newer entry with an older timestamp.
        """
        for attempt in range(1, self.append_max_retries + 1):
            snapshot = await self._load_log(request_id)
            if snapshot is None:
                return None
            version, updates = snapshot
            entry = {**maintenance_update.to_document(), "timestamp": format_timestamp(utc_now())}

            stmt = (
                update(MaintenanceRequest)
                .where(
                    MaintenanceRequest.request_id == request_id,
                    MaintenanceRequest.version == version,
                )
                .values(updates=[*updates, entry], version=version + 1)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            if result.rowcount == 1:
                await self.session.flush()
                return await self.get_by_request_id(request_id)

            logger.debug(
                "Version conflict appending to %s (attempt %d/%d)",
                request_id,
                attempt,
                self.append_max_retries,
            )

        logger.warning(
            "Giving up appending to %s after %d attempts", request_id, self.append_max_retries
        )
        raise ConcurrentModificationError(request_id)

    async def assign_contractor(
        self, request_id: str, contractor_id: str
    ) -> Optional[MaintenanceRequest]:
        """Overwrite assigned_to in a single UPDATE"""
        stmt = (
            update(MaintenanceRequest)
            .where(MaintenanceRequest.request_id == request_id)
            .values(assigned_to=contractor_id, version=MaintenanceRequest.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        await self.session.flush()
        return await self.get_by_request_id(request_id)

    async def change_status(
        self,
        request_id: str,
        status: MaintenanceStatus,
        expected_status: MaintenanceStatus,
    ) -> Optional[MaintenanceRequest]:
        """Set status only if it still equals expected_status"""
        stmt = (
            update(MaintenanceRequest)
            .where(
                MaintenanceRequest.request_id == request_id,
                MaintenanceRequest.status == expected_status,
            )
            .values(status=status, version=MaintenanceRequest.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            if await self._load_log(request_id) is None:
                return None
            raise ConcurrentModificationError(
                request_id, "Maintenance request status changed concurrently"
            )
        await self.session.flush()
        return await self.get_by_request_id(request_id)

    async def list_by_property(
        self, property_id: str, active_only: bool = False
    ) -> List[MaintenanceRequest]:
        """List requests for a property, oldest first"""
        stmt = select(MaintenanceRequest).where(MaintenanceRequest.property_id == property_id)
        if active_only:
            stmt = stmt.where(MaintenanceRequest.status.in_(MaintenanceStatus.active()))
        stmt = stmt.order_by(MaintenanceRequest.created_at.asc()).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, request_id: str) -> bool:
        """Delete the request row; the embedded log goes with it"""
        stmt = (
            delete(MaintenanceRequest)
            .where(MaintenanceRequest.request_id == request_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def _load_log(self, request_id: str) -> Optional[Tuple[int, List[dict]]]:
        stmt = select(MaintenanceRequest.version, MaintenanceRequest.updates).where(
            MaintenanceRequest.request_id == request_id
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return row[0], list(row[1] or [])
