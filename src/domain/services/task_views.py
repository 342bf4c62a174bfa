"""Filtered views and statistics over a task snapshot.

Pure functions: they never touch storage and may be called concurrently.
A single ``now`` is used per call so that every task is classified against
the same instant.
"""

from collections.abc import Sequence
from datetime import datetime

from domain.entities.task import Task, TaskFilter, TaskState, TaskStatistics

_STATE_FOR_FILTER: dict[TaskFilter, TaskState] = {
    TaskFilter.ACTIVE: TaskState.ACTIVE,
    TaskFilter.COMPLETED: TaskState.COMPLETED,
    TaskFilter.EXPIRED: TaskState.EXPIRED,
}


def filter_tasks(
    tasks: Sequence[Task], mode: TaskFilter, now: datetime | None = None
) -> list[Task]:
    """Return the tasks matching ``mode``, preserving input order."""
    if mode is TaskFilter.ALL:
        return list(tasks)

    now = now or datetime.now()
    wanted = _STATE_FOR_FILTER[mode]
    return [task for task in tasks if task.state(now) is wanted]


def calculate_statistics(tasks: Sequence[Task], now: datetime | None = None) -> TaskStatistics:
    """Count tasks per state. completed + active + expired == total."""
    if not tasks:
        return TaskStatistics.empty()

    now = now or datetime.now()
    counts = {state: 0 for state in TaskState}
    for task in tasks:
        counts[task.state(now)] += 1

    return TaskStatistics(
        total=len(tasks),
        completed=counts[TaskState.COMPLETED],
        active=counts[TaskState.ACTIVE],
        expired=counts[TaskState.EXPIRED],
    )
