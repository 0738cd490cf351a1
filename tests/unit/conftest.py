import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import MaintenanceRequest, MaintenanceStatus


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_request():
    def _make(
        request_id="P1T120250101120000000000",
        property_id="P1",
        tenant_id="T1",
        status=MaintenanceStatus.open,
        assigned_to=None,
        updates=None,
    ):
        return MaintenanceRequest(
            request_id=request_id,
            property_id=property_id,
            tenant_id=tenant_id,
            description="Leaking faucet",
            status=status,
            assigned_to=assigned_to,
            updates=updates or [],
        )

    return _make
