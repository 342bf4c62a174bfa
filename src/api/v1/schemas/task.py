"""Pydantic schemas for Task API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.task import MutationOutcome, TaskState


class TaskCreate(BaseModel):
    """Schema for creating a Task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    due_date: datetime = Field(..., description="Selected day, plus time of day if has_time")
    has_time: bool = Field(
        False,
        description="When false the deadline is 23:59 on the selected day",
    )


class TaskUpdate(BaseModel):
    """Schema for updating a Task. All three fields are applied together."""

    title: str = Field(..., min_length=1, max_length=255)
    is_completed: bool
    due_date: datetime


class TaskResponse(BaseModel):
    """Schema for Task response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Buy groceries",
                "description": "Milk, bread, eggs",
                "due_date": "2026-01-28T23:59:00",
                "has_time": True,
                "is_completed": False,
                "state": "active",
                "created_at": "2026-01-27T10:00:00",
                "updated_at": "2026-01-27T10:00:00",
                "completed_at": None,
            }
        },
    )

    id: UUID
    title: str
    description: str | None
    due_date: datetime | None
    has_time: bool
    is_completed: bool
    state: TaskState
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None


class TaskListResponse(BaseModel):
    """Schema for list of Tasks response."""

    data: list[TaskResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TaskDetailResponse(BaseModel):
    """Schema for single Task response."""

    data: TaskResponse


class TaskMutationResponse(BaseModel):
    """Task after a guarded mutation, with whether the change was applied."""

    data: TaskResponse
    outcome: MutationOutcome
    applied: bool


class TaskStatisticsResponse(BaseModel):
    total: int
    completed: int
    active: int
    expired: int


class ReminderResponse(BaseModel):
    identifier: str
    fire_at: datetime
    title: str
    body: str


class ReminderListResponse(BaseModel):
    data: list[ReminderResponse]
