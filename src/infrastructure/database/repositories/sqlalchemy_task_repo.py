"""SQLAlchemy implementation of Task repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PersistenceError
from domain.entities.task import Task
from infrastructure.database.models import TaskModel


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Task]:
        """Get every task in creation order."""
        stmt = select(TaskModel).order_by(TaskModel.created_at, TaskModel.id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load tasks: {e}") from e
        return [self._to_entity(model) for model in result.scalars()]

    async def get_overdue(self, now: datetime) -> list[Task]:
        """Get uncompleted tasks whose due date has passed."""
        stmt = (
            select(TaskModel)
            .where(
                TaskModel.due_date.is_not(None),
                TaskModel.due_date < now,
                TaskModel.is_completed.is_(False),
            )
            .order_by(TaskModel.due_date)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to query overdue tasks: {e}") from e
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        model = self._to_model(task)
        self._session.add(model)
        try:
            await self._session.flush()
            await self._session.refresh(model)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to insert task {task.id}: {e}") from e
        return self._to_entity(model)

    async def update(self, task: Task) -> Task:
        """Update an existing task."""
        model = await self._get_model(task.id)

        if not model:
            raise PersistenceError(f"Task {task.id} vanished before update")

        model.title = task.title
        model.description = task.description
        model.due_date = task.due_date
        model.is_completed = task.is_completed
        model.updated_at = task.updated_at
        model.completed_at = task.completed_at

        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update task {task.id}: {e}") from e
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a task."""
        model = await self._get_model(id)

        if not model:
            return False

        try:
            await self._session.delete(model)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete task {id}: {e}") from e
        return True

    async def _get_model(self, id: UUID) -> TaskModel | None:
        stmt = select(TaskModel).where(TaskModel.id == id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load task {id}: {e}") from e
        return result.scalar_one_or_none()

    def _to_entity(self, model: TaskModel) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            title=model.title,
            description=model.description,
            due_date=model.due_date,
            is_completed=model.is_completed,
            created_at=model.created_at,
            updated_at=model.updated_at,
            completed_at=model.completed_at,
        )

    def _to_model(self, entity: Task) -> TaskModel:
        """Convert domain entity to ORM model."""
        return TaskModel(
            id=entity.id,
            title=entity.title,
            description=entity.description,
            due_date=entity.due_date,
            is_completed=entity.is_completed,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            completed_at=entity.completed_at,
        )
