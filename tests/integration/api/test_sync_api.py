"""Integration tests for Sync API endpoints."""

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from api.v1.dependencies import get_sync_service
from core.exceptions import SyncError
from domain.services.sync_service import NOT_CONFIGURED_MESSAGE, SyncService
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.fakes import FakeSyncGateway


class TestSyncApi:
    @pytest.mark.asyncio
    async def test_initial_status_is_unknown(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/sync/status")

        assert response.status_code == 200
        assert response.json() == {"state": "unknown", "message": None}

    @pytest.mark.asyncio
    async def test_manual_sync_runs_in_background(
        self, client: AsyncClient, sync_service: SyncService, sync_gateway: FakeSyncGateway
    ) -> None:
        response = await client.post("/api/v1/sync")

        assert response.status_code == 202
        assert response.json()["state"] == "syncing"

        await sync_service.wait_idle()
        status = (await client.get("/api/v1/sync/status")).json()
        assert status == {"state": "synced", "message": None}
        assert sync_gateway.calls == [[]]

    @pytest.mark.asyncio
    async def test_mutation_pushes_snapshot(
        self, client: AsyncClient, sync_service: SyncService, sync_gateway: FakeSyncGateway
    ) -> None:
        due = (datetime.now() + timedelta(days=3)).replace(microsecond=0)

        await client.post(
            "/api/v1/tasks",
            json={"title": "Book flights", "due_date": due.isoformat(), "has_time": True},
        )
        await sync_service.wait_idle()

        assert [t.title for t in sync_gateway.calls[-1]] == ["Book flights"]

    @pytest.mark.asyncio
    async def test_failed_sync_never_fails_mutation(
        self, client: AsyncClient, sync_service: SyncService, sync_gateway: FakeSyncGateway
    ) -> None:
        sync_gateway.error = SyncError("Remote unreachable: connection refused")
        due = datetime.now() + timedelta(days=1)

        response = await client.post(
            "/api/v1/tasks",
            json={"title": "Offline task", "due_date": due.isoformat(), "has_time": True},
        )
        await sync_service.wait_idle()

        assert response.status_code == 201
        status = (await client.get("/api/v1/sync/status")).json()
        assert status == {"state": "error", "message": "Remote unreachable: connection refused"}

    @pytest.mark.asyncio
    async def test_not_configured(
        self,
        app: FastAPI,
        client: AsyncClient,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    ) -> None:
        unconfigured = SyncService(uow_factory)
        app.dependency_overrides[get_sync_service] = lambda: unconfigured

        response = await client.post("/api/v1/sync")

        assert response.status_code == 202
        assert response.json() == {"state": "error", "message": NOT_CONFIGURED_MESSAGE}
