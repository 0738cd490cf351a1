from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.maintenance_request_repository import (
    DEFAULT_APPEND_MAX_RETRIES,
    MaintenanceRequestRepository,
)
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, append_max_retries: int = DEFAULT_APPEND_MAX_RETRIES):
        self.session = session
        self.append_max_retries = append_max_retries

    async def __aenter__(self):
        self.maintenance_requests = MaintenanceRequestRepository(
            self.session, append_max_retries=self.append_max_retries
        )
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
