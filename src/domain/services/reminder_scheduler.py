"""Reminder scheduling and the expiry sweep."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from domain.entities.reminder import Reminder, ReminderOffset, reminder_identifiers
from domain.entities.task import Task
from domain.events import EventEmitter, TaskExpired
from domain.gateways.notification_gateway import INotificationGateway
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

REMINDER_TITLE = "Task reminder"
MORNING_REMINDER_TITLE = "Due today"


class ReminderScheduler:
    """Keeps each task's pending notifications consistent with its due date.

    Every resync cancels all identifiers the task could own before anything
    new is scheduled, so repeated edits never leave stale or duplicate
    triggers behind.
    """

    def __init__(
        self,
        notifications: INotificationGateway,
        uow_factory: Callable[[], IUnitOfWork],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._notifications = notifications
        self._uow_factory = uow_factory
        self._clock = clock
        self.expired_events: EventEmitter[TaskExpired] = EventEmitter("task_expired")

    def plan(self, task: Task) -> list[Reminder]:
        """Build every reminder candidate for a task, past or future."""
        if task.due_date is None:
            return []

        reminders = []
        for offset in ReminderOffset:
            if offset is ReminderOffset.MORNING:
                title = MORNING_REMINDER_TITLE
                body = f"Task '{task.title}' is due today"
            else:
                title = REMINDER_TITLE
                body = f"Task '{task.title}' is due in {offset.label}"
            reminders.append(
                Reminder(
                    identifier=offset.identifier(task.id),
                    task_id=task.id,
                    offset=offset,
                    fire_at=offset.fire_at(task.due_date),
                    title=title,
                    body=body,
                )
            )
        return reminders

    def cancel(self, task_id: UUID) -> None:
        """Cancel every reminder the task could own."""
        try:
            self._notifications.cancel(reminder_identifiers(task_id))
        except Exception:
            logger.exception("reminder_cancel_failed", task_id=str(task_id))

    def resync(self, task: Task) -> list[Reminder]:
        """Cancel then reschedule the task's reminders.

        Only an active task gets new reminders, and only candidates strictly
        in the future are scheduled. Returns what was scheduled.
        """
        self.cancel(task.id)

        now = self._clock()
        if not task.is_active(now):
            logger.debug(
                "reminders_cleared",
                task_id=str(task.id),
                state=task.state(now).value,
            )
            return []

        scheduled: list[Reminder] = []
        for reminder in self.plan(task):
            if reminder.fire_at <= now:
                continue
            try:
                self._notifications.schedule(
                    reminder.identifier,
                    reminder.fire_at,
                    reminder.title,
                    reminder.body,
                )
            except Exception:
                logger.exception(
                    "reminder_schedule_failed",
                    task_id=str(task.id),
                    identifier=reminder.identifier,
                )
                continue
            scheduled.append(reminder)

        logger.info(
            "reminders_scheduled",
            task_id=str(task.id),
            count=len(scheduled),
            offsets=[r.offset.value for r in scheduled],
        )
        return scheduled

    def pending_for(self, task_id: UUID) -> set[str]:
        """Identifiers of the task's reminders that are still waiting to fire."""
        return self._notifications.pending_identifiers() & reminder_identifiers(task_id)

    async def sweep_expired(self) -> list[Task]:
        """Announce every overdue, uncompleted task. Storage is never modified."""
        now = self._clock()
        async with self._uow_factory() as uow:
            overdue = await uow.tasks.get_overdue(now)

        for task in overdue:
            self.expired_events.emit(
                TaskExpired(
                    task_id=task.id,
                    title=task.title,
                    due_date=task.due_date,  # type: ignore[arg-type]
                    detected_at=now,
                )
            )

        if overdue:
            logger.info("expired_tasks_found", count=len(overdue))
        return overdue


async def run_expiry_sweep(scheduler: ReminderScheduler, interval_seconds: float = 60.0) -> None:
    """Periodically run the expiry sweep until cancelled."""
    sleep_s = max(1.0, float(interval_seconds))

    while True:
        try:
            await scheduler.sweep_expired()
        except Exception:
            logger.exception("expiry_sweep_failed")
        await asyncio.sleep(sleep_s)
