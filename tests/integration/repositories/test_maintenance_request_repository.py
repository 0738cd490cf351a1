"""
Integration tests for the SQLModel maintenance request repository.

Exercise the conditional writes directly against SQLite, including the
case where a rival writer lands between our read and our write.
"""

import asyncio

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.maintenance_request_repository import MaintenanceRequestRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.repositories.maintenance_request_repository import ConcurrentModificationError
from src.app.use_cases.maintenance import (
    AddMaintenanceUpdateCommand,
    AddMaintenanceUpdateUseCase,
)
from src.domain.base import utc_now
from src.domain.entities import (
    MaintenanceRequest,
    MaintenanceStatus,
    MaintenanceUpdate,
    generate_request_id,
)


async def _seed(repo, property_id="P1", tenant_id="T1", status=MaintenanceStatus.open):
    created_at = utc_now()
    request = MaintenanceRequest(
        request_id=generate_request_id(property_id, tenant_id, created_at),
        property_id=property_id,
        tenant_id=tenant_id,
        description="Leaking faucet",
        status=status,
        created_at=created_at,
    )
    return await repo.create(request)


class InterleavingRepository(MaintenanceRequestRepository):
    """Lets a rival append land right after our first read of the log"""

    def __init__(self, session, rival_update, **kwargs):
        super().__init__(session, **kwargs)
        self.rival_update = rival_update
        self.reads = 0

    async def _load_log(self, request_id):
        snapshot = await super()._load_log(request_id)
        self.reads += 1
        if self.reads == 1 and snapshot is not None:
            rival = MaintenanceRequestRepository(self.session)
            await rival.append_update(request_id, self.rival_update)
        return snapshot


class StaleRepository(MaintenanceRequestRepository):
    """Always reads a version that is already outdated"""

    async def _load_log(self, request_id):
        snapshot = await super()._load_log(request_id)
        if snapshot is None:
            return None
        version, updates = snapshot
        return version - 1, updates


@pytest.mark.asyncio
async def test_create_and_get(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)

    fetched = await repo.get_by_request_id(created.request_id)

    assert fetched is not None
    assert fetched.status == MaintenanceStatus.open
    assert fetched.updates == []
    assert fetched.version == 1


@pytest.mark.asyncio
async def test_create_duplicate_id_violates_uniqueness(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)
    await db_session.commit()
    db_session.expunge_all()

    duplicate = MaintenanceRequest(
        request_id=created.request_id,
        property_id="P1",
        tenant_id="T1",
        description="Duplicate",
    )
    with pytest.raises(IntegrityError):
        await repo.create(duplicate)
    await db_session.rollback()


@pytest.mark.asyncio
async def test_append_update_bumps_version(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)

    first = await repo.append_update(
        created.request_id, MaintenanceUpdate(updated_by="U1", description="one")
    )
    second = await repo.append_update(
        created.request_id, MaintenanceUpdate(updated_by="U2", description="two")
    )

    assert first.version == 2
    assert second.version == 3
    assert [u["description"] for u in second.updates] == ["one", "two"]


@pytest.mark.asyncio
async def test_append_update_missing_request(db_session):
    repo = MaintenanceRequestRepository(db_session)

    result = await repo.append_update(
        "does-not-exist", MaintenanceUpdate(updated_by="U1", description="x")
    )

    assert result is None


@pytest.mark.asyncio
async def test_append_update_retries_after_rival_write(db_session):
    """Test a concurrent append is kept, not overwritten"""
    seed_repo = MaintenanceRequestRepository(db_session)
    created = await _seed(seed_repo)

    repo = InterleavingRepository(
        db_session, MaintenanceUpdate(updated_by="U2", description="rival")
    )
    result = await repo.append_update(
        created.request_id, MaintenanceUpdate(updated_by="U1", description="ours")
    )

    assert repo.reads == 2
    assert [u["description"] for u in result.updates] == ["rival", "ours"]
    assert result.version == 3


@pytest.mark.asyncio
async def test_append_update_gives_up_after_max_retries(db_session):
    seed_repo = MaintenanceRequestRepository(db_session)
    created = await _seed(seed_repo)

    repo = StaleRepository(db_session, append_max_retries=3)
    with pytest.raises(ConcurrentModificationError):
        await repo.append_update(
            created.request_id, MaintenanceUpdate(updated_by="U1", description="lost")
        )

    unchanged = await seed_repo.get_by_request_id(created.request_id)
    assert unchanged.updates == []
    assert unchanged.version == 1


@pytest.mark.asyncio
async def test_assign_contractor_overwrites(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)

    await repo.assign_contractor(created.request_id, "C1")
    result = await repo.assign_contractor(created.request_id, "C2")

    assert result.assigned_to == "C2"
    assert result.status == MaintenanceStatus.open
    assert result.version == 3


@pytest.mark.asyncio
async def test_assign_contractor_missing_request(db_session):
    repo = MaintenanceRequestRepository(db_session)

    assert await repo.assign_contractor("does-not-exist", "C1") is None


@pytest.mark.asyncio
async def test_change_status_compare_and_set(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)

    result = await repo.change_status(
        created.request_id, MaintenanceStatus.in_progress, expected_status=MaintenanceStatus.open
    )
    assert result.status == MaintenanceStatus.in_progress

    # Stale expectation: someone already moved it off Open
    with pytest.raises(ConcurrentModificationError):
        await repo.change_status(
            created.request_id, MaintenanceStatus.closed, expected_status=MaintenanceStatus.open
        )


@pytest.mark.asyncio
async def test_change_status_missing_request(db_session):
    repo = MaintenanceRequestRepository(db_session)

    result = await repo.change_status(
        "does-not-exist", MaintenanceStatus.closed, expected_status=MaintenanceStatus.open
    )

    assert result is None


@pytest.mark.asyncio
async def test_list_by_property_active_only(db_session):
    repo = MaintenanceRequestRepository(db_session)
    open_request = await _seed(repo, tenant_id="T1")
    in_progress = await _seed(repo, tenant_id="T2", status=MaintenanceStatus.in_progress)
    await _seed(repo, tenant_id="T3", status=MaintenanceStatus.closed)
    await _seed(repo, property_id="P2")

    everything = await repo.list_by_property("P1")
    active = await repo.list_by_property("P1", active_only=True)

    assert len(everything) == 3
    assert [r.request_id for r in active] == [open_request.request_id, in_progress.request_id]
    assert await repo.list_by_property("P-none") == []


@pytest.mark.asyncio
async def test_delete(db_session):
    repo = MaintenanceRequestRepository(db_session)
    created = await _seed(repo)
    await repo.append_update(
        created.request_id, MaintenanceUpdate(updated_by="U1", description="x")
    )

    assert await repo.delete(created.request_id) is True
    assert await repo.get_by_request_id(created.request_id) is None
    assert await repo.delete(created.request_id) is False


@pytest.mark.asyncio
async def test_retried_append_is_stamped_after_rival_entry(db_session):
    """Test timestamps stay non-decreasing when our entry was built before a rival write"""
    seed_repo = MaintenanceRequestRepository(db_session)
    created = await _seed(seed_repo)

    ours = MaintenanceUpdate(updated_by="U1", description="ours")
    await asyncio.sleep(0.01)
    repo = InterleavingRepository(
        db_session, MaintenanceUpdate(updated_by="U2", description="rival")
    )
    result = await repo.append_update(created.request_id, ours)

    assert [u["description"] for u in result.updates] == ["rival", "ours"]
    timestamps = [u["timestamp"] for u in result.updates]
    assert timestamps == sorted(timestamps)


@pytest.mark.asyncio
async def test_concurrent_appends_on_separate_sessions_keep_every_entry(engine, db_session):
    """Test N appends from N sessions leave N entries in the log"""
    seed_repo = MaintenanceRequestRepository(db_session)
    created = await _seed(seed_repo)
    await db_session.commit()

    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    writers = 8

    async def append(index):
        async with Session() as session:
            use_case = AddMaintenanceUpdateUseCase(
                SqlAlchemyUnitOfWork(session, append_max_retries=writers * 2)
            )
            return await use_case.execute(
                AddMaintenanceUpdateCommand(
                    request_id=created.request_id,
                    updated_by=f"U{index}",
                    description=f"note {index}",
                )
            )

    results = await asyncio.gather(*(append(i) for i in range(writers)))

    assert [r.error for r in results if r.is_err()] == []

    async with Session() as session:
        stored = await MaintenanceRequestRepository(session).get_by_request_id(
            created.request_id
        )
    assert len(stored.updates) == writers
    assert {u["description"] for u in stored.updates} == {f"note {i}" for i in range(writers)}
    assert stored.version == writers + 1
    timestamps = [u["timestamp"] for u in stored.updates]
    assert timestamps == sorted(timestamps)
