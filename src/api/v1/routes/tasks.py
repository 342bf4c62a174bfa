"""Task API routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from api.v1.dependencies import (
    get_notification_center,
    get_preferences_service,
    get_task_store,
)
from api.v1.schemas.task import (
    ReminderListResponse,
    ReminderResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskListResponse,
    TaskMutationResponse,
    TaskResponse,
    TaskStatisticsResponse,
    TaskUpdate,
)
from domain.entities.reminder import reminder_identifiers
from domain.entities.task import MutationOutcome, Task, TaskDraft, TaskFilter
from domain.services.preferences_service import PreferencesService
from domain.services.task_store import TaskStore
from domain.services.task_views import calculate_statistics, filter_tasks
from infrastructure.notifications.local_notification_center import LocalNotificationCenter

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks",
    responses={
        200: {"description": "Tasks matching the filter, in creation order"},
    },
)
async def list_tasks(
    store: TaskStore = Depends(get_task_store),
    preferences: PreferencesService = Depends(get_preferences_service),
    filter_mode: TaskFilter | None = Query(
        None, alias="filter", description="Task filter; defaults to the saved preference"
    ),
) -> TaskListResponse:
    """
    Get tasks as a flat list.

    Without `filter` the list uses the filter saved in preferences.
    Statistics in `meta` always cover the whole collection.
    """
    mode = filter_mode or (await preferences.get()).selected_filter
    now = datetime.now()
    tasks = await store.list_all()
    matching = filter_tasks(tasks, mode, now)
    stats = calculate_statistics(tasks, now)

    return TaskListResponse(
        data=[_build_task_response(t, now) for t in matching],
        meta={
            "filter": mode.value,
            "count": len(matching),
            "total": stats.total,
        },
    )


@router.get(
    "/statistics",
    response_model=TaskStatisticsResponse,
    summary="Task counts per state",
)
async def get_statistics(
    store: TaskStore = Depends(get_task_store),
) -> TaskStatisticsResponse:
    """Counts of completed, active and expired tasks. They always add up to total."""
    stats = calculate_statistics(await store.list_all())
    return TaskStatisticsResponse(
        total=stats.total,
        completed=stats.completed,
        active=stats.active,
        expired=stats.expired,
    )


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Get a task",
    responses={
        200: {"description": "Task details"},
        404: {"description": "Task not found"},
    },
)
async def get_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    task = await store.get(task_id)
    return TaskDetailResponse(data=_build_task_response(task))


@router.get(
    "/{task_id}/reminders",
    response_model=ReminderListResponse,
    summary="Pending reminders for a task",
    responses={
        404: {"description": "Task not found"},
    },
)
async def list_task_reminders(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
    center: LocalNotificationCenter = Depends(get_notification_center),
) -> ReminderListResponse:
    """Reminders still waiting to fire, earliest first."""
    await store.get(task_id)
    owned = reminder_identifiers(task_id)
    return ReminderListResponse(
        data=[
            ReminderResponse(
                identifier=p.identifier,
                fire_at=p.fire_at,
                title=p.title,
                body=p.body,
            )
            for p in center.pending()
            if p.identifier in owned
        ]
    )


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Blank title, or due date in the past or more than 10 years ahead"},
        422: {"description": "Validation error"},
    },
)
async def create_task(
    body: TaskCreate,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    """
    Create a new active task and schedule its reminders.

    Without `has_time` the deadline is 23:59 on the given day.
    """
    task = await store.create(
        TaskDraft(
            title=body.title,
            description=body.description,
            due_date=_to_local(body.due_date),
            has_time=body.has_time,
        )
    )
    return TaskDetailResponse(data=_build_task_response(task))


@router.put(
    "/{task_id}",
    response_model=TaskMutationResponse,
    summary="Update a task",
    responses={
        200: {"description": "Task after the update; `applied` is false for completed or expired tasks"},
        400: {"description": "Blank title, or due date on an earlier day or more than 10 years ahead"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    store: TaskStore = Depends(get_task_store),
) -> TaskMutationResponse:
    """
    Replace title, completion flag and due date in one step.

    Completed and expired tasks are not editable; the call succeeds
    with `applied: false` and the task unchanged.
    """
    outcome = await store.update(
        task_id,
        title=body.title,
        is_completed=body.is_completed,
        due_date=_to_local(body.due_date),
    )
    return await _build_mutation_response(store, task_id, outcome)


@router.post(
    "/{task_id}/toggle",
    response_model=TaskMutationResponse,
    summary="Complete a task",
    responses={
        200: {"description": "Task after the toggle; `applied` is false for completed or expired tasks"},
        404: {"description": "Task not found"},
    },
)
async def toggle_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> TaskMutationResponse:
    """Mark an active task as completed. Completed tasks cannot be reopened."""
    outcome = await store.toggle_complete(task_id)
    return await _build_mutation_response(store, task_id, outcome)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task deleted successfully"},
        404: {"description": "Task not found"},
    },
)
async def delete_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> None:
    """Delete a task in any state and cancel its reminders."""
    await store.delete(task_id)
    return None


def _to_local(value: datetime) -> datetime:
    """Deadlines are stored as naive local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


async def _build_mutation_response(
    store: TaskStore, task_id: UUID, outcome: MutationOutcome
) -> TaskMutationResponse:
    task = await store.get(task_id)
    return TaskMutationResponse(
        data=_build_task_response(task),
        outcome=outcome,
        applied=outcome.applied,
    )


def _build_task_response(task: Task, now: datetime | None = None) -> TaskResponse:
    """Convert domain entity to response schema with its derived state."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        has_time=task.has_time,
        is_completed=task.is_completed,
        state=task.state(now or datetime.now()),
        created_at=task.created_at,
        updated_at=task.updated_at,
        completed_at=task.completed_at,
    )
