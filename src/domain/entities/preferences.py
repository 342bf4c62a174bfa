"""User preference entities persisted in the settings store."""

from dataclasses import dataclass
from enum import StrEnum

from domain.entities.task import TaskFilter

SELECTED_FILTER_KEY = "selected_filter"
SELECTED_THEME_KEY = "selected_theme"


class AppTheme(StrEnum):
    DEFAULT = "default"
    DARK = "dark"


@dataclass(frozen=True, slots=True)
class Preferences:
    """Selected list filter and theme, restored at startup."""

    selected_filter: TaskFilter = TaskFilter.ALL
    theme: AppTheme = AppTheme.DEFAULT
