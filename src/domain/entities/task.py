"""Task domain entity and the value objects derived from it."""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import StrEnum
from uuid import UUID, uuid4

END_OF_DAY = time(hour=23, minute=59)


class TaskState(StrEnum):
    """Read-time state of a task. Never persisted."""

    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


class TaskFilter(StrEnum):
    """List filter selected by the user."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


class MutationOutcome(StrEnum):
    """Result of a guarded mutation.

    The two ``SKIPPED_*`` members are business-rule no-ops, not errors.
    """

    APPLIED = "applied"
    SKIPPED_COMPLETED = "skipped_completed"
    SKIPPED_EXPIRED = "skipped_expired"

    @property
    def applied(self) -> bool:
        return self is MutationOutcome.APPLIED


@dataclass
class Task:
    """Domain entity for a to-do task."""

    title: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    due_date: datetime | None = None
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @property
    def has_time(self) -> bool:
        """True when the deadline carries a time of day other than midnight."""
        if self.due_date is None:
            return False
        return self.due_date.hour != 0 or self.due_date.minute != 0

    def is_expired(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now

    def state(self, now: datetime) -> TaskState:
        """Exactly one state holds at any instant; completion wins over expiry."""
        if self.is_completed:
            return TaskState.COMPLETED
        if self.is_expired(now):
            return TaskState.EXPIRED
        return TaskState.ACTIVE

    def is_active(self, now: datetime) -> bool:
        return self.state(now) is TaskState.ACTIVE

    def complete(self, now: datetime) -> None:
        """Mark the task as completed. There is no way back."""
        self.is_completed = True
        self.completed_at = now
        self.updated_at = now

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """Input for creating a task.

    When ``has_time`` is false only the calendar day of ``due_date`` is
    meaningful and the deadline falls at 23:59 on that day.
    """

    title: str
    due_date: datetime
    has_time: bool = False
    description: str | None = None

    @property
    def final_due_date(self) -> datetime:
        if self.has_time:
            return self.due_date
        return datetime.combine(self.due_date.date(), END_OF_DAY)


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    """Read-only value object: counts per task state."""

    total: int
    completed: int
    active: int
    expired: int

    @classmethod
    def empty(cls) -> "TaskStatistics":
        return cls(total=0, completed=0, active=0, expired=0)
