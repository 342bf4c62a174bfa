"""Unit tests for the background sync service."""

import asyncio

import pytest

from core.exceptions import PersistenceError, SyncError
from domain.entities.sync import SyncState, SyncStatus
from domain.entities.task import Task
from domain.services.sync_service import NOT_CONFIGURED_MESSAGE, SyncService
from tests.fakes import FakeSyncGateway, FakeUnitOfWork


@pytest.fixture
def gateway() -> FakeSyncGateway:
    return FakeSyncGateway()


@pytest.fixture
def service(uow: FakeUnitOfWork, gateway: FakeSyncGateway) -> SyncService:
    uow.tasks.get_all.return_value = [Task(title="Groceries")]
    return SyncService(lambda: uow, gateway)


class TestSyncServiceNotConfigured:
    @pytest.mark.asyncio
    async def test_reports_error_without_gateway(self, uow: FakeUnitOfWork) -> None:
        service = SyncService(lambda: uow)

        assert service.request_sync() is None
        assert service.status == SyncStatus.error(NOT_CONFIGURED_MESSAGE)
        uow.tasks.get_all.assert_not_called()


class TestSyncServiceRun:
    @pytest.mark.asyncio
    async def test_initial_status_is_unknown(self, service: SyncService) -> None:
        assert service.status.state is SyncState.UNKNOWN
        assert not service.is_running

    @pytest.mark.asyncio
    async def test_success_moves_through_syncing_to_synced(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        seen: list[SyncStatus] = []
        service.status_changes.subscribe(seen.append)

        job = service.request_sync()
        assert service.status.state is SyncState.SYNCING
        assert job is not None
        await job

        assert service.status == SyncStatus.synced()
        assert [s.state for s in seen] == [SyncState.SYNCING, SyncState.SYNCED]
        assert [t.title for t in gateway.calls[0]] == ["Groceries"]

    @pytest.mark.asyncio
    async def test_sync_error_sets_error_status(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        gateway.error = SyncError("Remote rejected sync: HTTP 503")

        service.request_sync()
        await service.wait_idle()

        assert service.status == SyncStatus.error("Remote rejected sync: HTTP 503")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        gateway.error = RuntimeError("boom")

        service.request_sync()
        await service.wait_idle()

        assert service.status == SyncStatus.error("boom")

    @pytest.mark.asyncio
    async def test_storage_failure_is_reported_as_sync_error(
        self, service: SyncService, uow: FakeUnitOfWork, gateway: FakeSyncGateway
    ) -> None:
        uow.tasks.get_all.side_effect = PersistenceError("database is locked")

        service.request_sync()
        await service.wait_idle()

        assert service.status.state is SyncState.ERROR
        assert service.status.message == "database is locked"
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_recovers_after_error(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        gateway.error = SyncError("Remote unreachable")
        service.request_sync()
        await service.wait_idle()

        gateway.error = None
        service.request_sync()
        await service.wait_idle()

        assert service.status == SyncStatus.synced()
        assert len(gateway.calls) == 2


class TestSyncServiceSingleFlight:
    @pytest.mark.asyncio
    async def test_request_during_run_pushes_newer_snapshot(
        self, service: SyncService, uow: FakeUnitOfWork, gateway: FakeSyncGateway
    ) -> None:
        gateway.release = asyncio.Event()
        uow.tasks.get_all.return_value = [Task(title="first")]

        first = service.request_sync()
        await asyncio.sleep(0)
        assert [t.title for t in gateway.calls[0]] == ["first"]

        uow.tasks.get_all.return_value = [Task(title="first"), Task(title="second")]
        second = service.request_sync()

        assert first is second
        assert service.is_running

        gateway.release.set()
        await service.wait_idle()

        assert len(gateway.calls) == 2
        assert [t.title for t in gateway.calls[-1]] == ["first", "second"]
        assert service.status == SyncStatus.synced()
        assert not service.is_running

    @pytest.mark.asyncio
    async def test_many_requests_during_run_collapse_into_one_rerun(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        gateway.release = asyncio.Event()

        service.request_sync()
        await asyncio.sleep(0)
        for _ in range(5):
            service.request_sync()

        gateway.release.set()
        await service.wait_idle()

        assert len(gateway.calls) == 2

    @pytest.mark.asyncio
    async def test_rerun_emits_only_final_status(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        gateway.release = asyncio.Event()
        gateway.error = SyncError("Remote unreachable")
        seen: list[SyncStatus] = []
        service.status_changes.subscribe(seen.append)

        service.request_sync()
        await asyncio.sleep(0)
        service.request_sync()
        gateway.release.set()
        await service.wait_idle()

        assert len(gateway.calls) == 2
        assert service.status == SyncStatus.error("Remote unreachable")
        assert [s.state for s in seen] == [SyncState.SYNCING, SyncState.ERROR]

    @pytest.mark.asyncio
    async def test_requests_before_job_starts_run_once(
        self, service: SyncService, gateway: FakeSyncGateway
    ) -> None:
        seen: list[SyncStatus] = []
        service.status_changes.subscribe(seen.append)

        service.request_sync()
        service.request_sync()
        await service.wait_idle()

        assert len(gateway.calls) == 1
        assert [s.state for s in seen] == [SyncState.SYNCING, SyncState.SYNCED]

    @pytest.mark.asyncio
    async def test_wait_idle_without_job(self, service: SyncService) -> None:
        await service.wait_idle()

        assert service.status.state is SyncState.UNKNOWN
