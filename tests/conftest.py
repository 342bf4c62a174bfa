"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

# Keep the module-level engine off disk and remote sync off
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SYNC_URL"] = ""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from domain.services.preferences_service import PreferencesService
from domain.services.reminder_scheduler import ReminderScheduler
from domain.services.sync_service import SyncService
from domain.services.task_store import TaskStore
from infrastructure.database.models import Base
from infrastructure.database.session import create_schema
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.notifications.local_notification_center import LocalNotificationCenter
from tests.fakes import FakeSyncGateway


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine, one database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}", echo=False)
    await create_schema(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Create a UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def notification_center() -> Generator[LocalNotificationCenter, None, None]:
    center = LocalNotificationCenter()
    yield center
    center.clear()


@pytest.fixture
def sync_gateway() -> FakeSyncGateway:
    return FakeSyncGateway()


@pytest.fixture
async def sync_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], sync_gateway: FakeSyncGateway
) -> AsyncGenerator[SyncService, None]:
    service = SyncService(uow_factory, gateway=sync_gateway)
    yield service
    await service.wait_idle()


@pytest.fixture
def reminder_scheduler(
    notification_center: LocalNotificationCenter,
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> ReminderScheduler:
    return ReminderScheduler(notification_center, uow_factory)


@pytest.fixture
def task_store(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    reminder_scheduler: ReminderScheduler,
    sync_service: SyncService,
) -> TaskStore:
    return TaskStore(uow_factory, reminder_scheduler, sync_service)


@pytest.fixture
def preferences_service(uow_factory: Callable[[], SQLAlchemyUnitOfWork]) -> PreferencesService:
    return PreferencesService(uow_factory)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    notification_center: LocalNotificationCenter,
    sync_service: SyncService,
    task_store: TaskStore,
    preferences_service: PreferencesService,
) -> FastAPI:
    """
    Application wired to the test database.

    Every service the routes depend on is replaced with one built over the
    per-test SQLite file. The lifespan does not run under ASGITransport, so
    no expiry sweep is started.
    """
    from api.v1.dependencies import (
        get_notification_center,
        get_preferences_service,
        get_sync_service,
        get_task_store,
    )
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_notification_center] = lambda: notification_center
    app.dependency_overrides[get_sync_service] = lambda: sync_service
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_preferences_service] = lambda: preferences_service
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
