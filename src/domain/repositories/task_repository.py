"""Task repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.task import Task


class ITaskRepository(Protocol):
    """Repository interface for Task entities."""

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    async def get_all(self) -> list[Task]:
        """Get every task in creation order."""
        ...

    async def get_overdue(self, now: datetime) -> list[Task]:
        """Get uncompleted tasks whose due date is before ``now``."""
        ...

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        ...

    async def update(self, task: Task) -> Task:
        """Update an existing task."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a task and return success status."""
        ...
