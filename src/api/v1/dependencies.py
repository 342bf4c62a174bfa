"""Dependency injection factories for API v1.

This module is the composition root: each service is built once and shared
by every request and by the application lifespan.
"""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.preferences_service import PreferencesService
from domain.services.reminder_scheduler import ReminderScheduler
from domain.services.sync_service import SyncService
from domain.services.task_store import TaskStore
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.notifications.local_notification_center import LocalNotificationCenter
from infrastructure.sync.http_sync_gateway import HttpSyncGateway


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_notification_center() -> LocalNotificationCenter:
    """Get the process-wide notification center."""
    return LocalNotificationCenter()


@lru_cache
def get_reminder_scheduler() -> ReminderScheduler:
    """Get Reminder scheduler instance."""
    return ReminderScheduler(get_notification_center(), get_uow_factory())


@lru_cache
def get_sync_gateway() -> HttpSyncGateway | None:
    """Get the remote sync gateway, or None when sync is disabled."""
    if not settings.sync_enabled:
        return None
    return HttpSyncGateway(settings.sync_url, timeout_seconds=settings.sync_timeout_seconds)


@lru_cache
def get_sync_service() -> SyncService:
    """Get Sync service instance."""
    return SyncService(get_uow_factory(), gateway=get_sync_gateway())


@lru_cache
def get_task_store() -> TaskStore:
    """Get Task store instance."""
    return TaskStore(
        get_uow_factory(),
        reminder_scheduler=get_reminder_scheduler(),
        sync_service=get_sync_service(),
    )


@lru_cache
def get_preferences_service() -> PreferencesService:
    """Get Preferences service instance."""
    return PreferencesService(get_uow_factory())
