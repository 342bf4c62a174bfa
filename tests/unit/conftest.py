"""Shared fixtures for unit tests."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from domain.services.reminder_scheduler import ReminderScheduler
from domain.services.sync_service import SyncService
from tests.fakes import FakeClock, FakeNotificationGateway, FakeUnitOfWork

# Tuesday afternoon; every unit test runs against this instant.
NOW = datetime(2026, 3, 10, 14, 0)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def notifications() -> FakeNotificationGateway:
    return FakeNotificationGateway()


@pytest.fixture
def scheduler(
    notifications: FakeNotificationGateway, uow: FakeUnitOfWork, clock: FakeClock
) -> ReminderScheduler:
    """Reminder scheduler over the fake notification gateway and UoW."""
    return ReminderScheduler(notifications, lambda: uow, clock)


@pytest.fixture
def sync_spy() -> MagicMock:
    """Stands in for the sync service so tests can assert on request_sync."""
    return MagicMock(spec=SyncService)
