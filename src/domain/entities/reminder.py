"""Reminder value objects."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from uuid import UUID

MORNING_REMINDER_TIME = time(hour=8, minute=0)


class ReminderOffset(Enum):
    """Fixed reminder slots before a deadline.

    Each member's value is the identifier suffix. ``MORNING`` is not a
    relative offset: it fires at 08:00 local time on the due date.
    """

    FIFTEEN_MINUTES = "15min"
    ONE_HOUR = "1hour"
    SIX_HOURS = "6hours"
    TWELVE_HOURS = "12hours"
    MORNING = "morning"

    @property
    def lead_time(self) -> timedelta | None:
        return _LEAD_TIMES.get(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    def fire_at(self, due_date: datetime) -> datetime:
        lead = self.lead_time
        if lead is None:
            return datetime.combine(due_date.date(), MORNING_REMINDER_TIME)
        return due_date - lead

    def identifier(self, task_id: UUID) -> str:
        return f"{task_id}_{self.value}"


_LEAD_TIMES: dict[ReminderOffset, timedelta] = {
    ReminderOffset.FIFTEEN_MINUTES: timedelta(minutes=15),
    ReminderOffset.ONE_HOUR: timedelta(hours=1),
    ReminderOffset.SIX_HOURS: timedelta(hours=6),
    ReminderOffset.TWELVE_HOURS: timedelta(hours=12),
}

_LABELS: dict[ReminderOffset, str] = {
    ReminderOffset.FIFTEEN_MINUTES: "15 minutes",
    ReminderOffset.ONE_HOUR: "1 hour",
    ReminderOffset.SIX_HOURS: "6 hours",
    ReminderOffset.TWELVE_HOURS: "12 hours",
    ReminderOffset.MORNING: "today",
}


def reminder_identifiers(task_id: UUID) -> set[str]:
    """Every identifier a task can ever own, scheduled or not."""
    return {offset.identifier(task_id) for offset in ReminderOffset}


@dataclass(frozen=True, slots=True)
class Reminder:
    """A single notification trigger tied to a task's due date."""

    identifier: str
    task_id: UUID
    offset: ReminderOffset
    fire_at: datetime
    title: str
    body: str
