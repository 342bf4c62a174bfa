"""Pydantic schemas for Preferences API."""

from pydantic import BaseModel

from domain.entities.preferences import AppTheme
from domain.entities.task import TaskFilter


class PreferencesResponse(BaseModel):
    selected_filter: TaskFilter
    theme: AppTheme


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    selected_filter: TaskFilter | None = None
    theme: AppTheme | None = None
