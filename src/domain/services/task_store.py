"""Task store: the single owner of task mutations."""

from collections.abc import Callable
from datetime import date, datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    DueDateInPastError,
    DueDateTooFarError,
    InvalidTitleError,
    TaskNotFoundError,
)
from domain.entities.task import MutationOutcome, Task, TaskDraft
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.reminder_scheduler import ReminderScheduler
from domain.services.sync_service import SyncService

logger = structlog.get_logger()

# Due dates may be picked from today up to this many years ahead.
MAX_DUE_DATE_YEARS = 10


def latest_due_day(today: date) -> date:
    """Last calendar day a due date may fall on."""
    try:
        return today.replace(year=today.year + MAX_DUE_DATE_YEARS)
    except ValueError:
        # Feb 29 with no leap day ten years on
        return today.replace(year=today.year + MAX_DUE_DATE_YEARS, day=28)


def _check_not_too_far(due_date: datetime, now: datetime) -> None:
    latest = latest_due_day(now.date())
    if due_date.date() > latest:
        raise DueDateTooFarError(due_date.isoformat(), latest.isoformat())


class TaskStore:
    """Service layer for task CRUD and the guarded state transitions.

    Each mutation commits its Unit of Work before any side effect runs.
    Reminder resync happens after the commit; the remote sync is only
    requested, never awaited. A storage failure propagates and skips both.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        reminder_scheduler: ReminderScheduler,
        sync_service: Optional["SyncService"] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._uow_factory = uow_factory
        self._reminders = reminder_scheduler
        self._sync = sync_service
        self._clock = clock

    async def list_all(self) -> list[Task]:
        """Snapshot of every task in creation order."""
        async with self._uow_factory() as uow:
            return await uow.tasks.get_all()

    async def get(self, task_id: UUID) -> Task:
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))
            return task

    async def create(self, draft: TaskDraft) -> Task:
        """Validate and insert a new active task, then schedule its reminders."""
        title = draft.title.strip()
        if not title:
            raise InvalidTitleError()

        now = self._clock()
        due_date = draft.final_due_date
        if due_date < now:
            raise DueDateInPastError(due_date.isoformat())
        _check_not_too_far(due_date, now)

        task = Task(
            title=title,
            description=draft.description or None,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )

        async with self._uow_factory() as uow:
            created = await uow.tasks.create(task)
            await uow.commit()

        logger.info(
            "task_created",
            task_id=str(created.id),
            due_date=due_date.isoformat(),
            has_time=draft.has_time,
        )
        self._after_mutation(created)
        return created

    async def update(
        self,
        task_id: UUID,
        *,
        title: str,
        is_completed: bool,
        due_date: datetime,
    ) -> MutationOutcome:
        """Apply title, completion and due date together.

        Completed and expired tasks are left untouched; the outcome says why.
        """
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            now = self._clock()
            if task.is_completed:
                logger.info("task_update_skipped", task_id=str(task_id), reason="completed")
                return MutationOutcome.SKIPPED_COMPLETED
            if task.is_expired(now):
                logger.info("task_update_skipped", task_id=str(task_id), reason="expired")
                return MutationOutcome.SKIPPED_EXPIRED

            new_title = title.strip()
            if not new_title:
                raise InvalidTitleError()
            # Earlier today is allowed and leaves the task expired.
            if due_date.date() < now.date():
                raise DueDateInPastError(due_date.isoformat())
            _check_not_too_far(due_date, now)

            old_due_date = task.due_date
            task.title = new_title
            task.due_date = due_date
            task.updated_at = now
            if is_completed:
                task.complete(now)

            updated = await uow.tasks.update(task)
            await uow.commit()

        logger.info(
            "task_updated",
            task_id=str(task_id),
            old_due_date=old_due_date.isoformat() if old_due_date else None,
            new_due_date=due_date.isoformat(),
            is_completed=updated.is_completed,
        )
        self._after_mutation(updated)
        return MutationOutcome.APPLIED

    async def toggle_complete(self, task_id: UUID) -> MutationOutcome:
        """Complete an active task. One-way: there is no path back to active."""
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            now = self._clock()
            if task.is_completed:
                logger.info("task_toggle_skipped", task_id=str(task_id), reason="completed")
                return MutationOutcome.SKIPPED_COMPLETED
            if task.is_expired(now):
                logger.info("task_toggle_skipped", task_id=str(task_id), reason="expired")
                return MutationOutcome.SKIPPED_EXPIRED

            task.complete(now)
            updated = await uow.tasks.update(task)
            await uow.commit()

        logger.info("task_completed", task_id=str(task_id))
        self._after_mutation(updated)
        return MutationOutcome.APPLIED

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task in any state and cancel its reminders."""
        async with self._uow_factory() as uow:
            deleted = await uow.tasks.delete(task_id)
            if not deleted:
                raise TaskNotFoundError(str(task_id))
            await uow.commit()

        logger.info("task_deleted", task_id=str(task_id))
        self._reminders.cancel(task_id)
        self._request_sync()
        return True

    def _after_mutation(self, task: Task) -> None:
        self._reminders.resync(task)
        self._request_sync()

    def _request_sync(self) -> None:
        if self._sync:
            self._sync.request_sync()
