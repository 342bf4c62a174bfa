"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.settings_repository import ISettingsRepository
from domain.repositories.task_repository import ITaskRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    tasks: ITaskRepository
    settings: ISettingsRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
