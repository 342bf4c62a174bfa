"""Persisted user preferences (selected filter and theme)."""

from collections.abc import Callable
from dataclasses import replace
from enum import StrEnum
from typing import TypeVar

import structlog

from domain.entities.preferences import (
    SELECTED_FILTER_KEY,
    SELECTED_THEME_KEY,
    AppTheme,
    Preferences,
)
from domain.entities.task import TaskFilter
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

_E = TypeVar("_E", bound=StrEnum)


class PreferencesService:
    """Reads preferences once, then serves them from memory and writes through."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory
        self._cached: Preferences | None = None

    async def load(self) -> Preferences:
        """Load preferences from the settings store (only the first call hits storage)."""
        if self._cached is not None:
            return self._cached

        async with self._uow_factory() as uow:
            stored = await uow.settings.get_many([SELECTED_FILTER_KEY, SELECTED_THEME_KEY])

        self._cached = Preferences(
            selected_filter=_parse(TaskFilter, stored.get(SELECTED_FILTER_KEY), TaskFilter.ALL),
            theme=_parse(AppTheme, stored.get(SELECTED_THEME_KEY), AppTheme.DEFAULT),
        )
        logger.info(
            "preferences_loaded",
            selected_filter=self._cached.selected_filter.value,
            theme=self._cached.theme.value,
        )
        return self._cached

    async def get(self) -> Preferences:
        return await self.load()

    async def set_filter(self, mode: TaskFilter) -> Preferences:
        current = await self.load()
        await self._write(SELECTED_FILTER_KEY, mode.value)
        self._cached = replace(current, selected_filter=mode)
        return self._cached

    async def set_theme(self, theme: AppTheme) -> Preferences:
        current = await self.load()
        await self._write(SELECTED_THEME_KEY, theme.value)
        self._cached = replace(current, theme=theme)
        return self._cached

    async def _write(self, key: str, value: str) -> None:
        async with self._uow_factory() as uow:
            await uow.settings.set(key, value)
            await uow.commit()
        logger.info("preference_changed", key=key, value=value)


def _parse(enum_cls: type[_E], raw: str | None, default: _E) -> _E:
    """Map a stored value back onto its enum, falling back to the default."""
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning("preference_value_unknown", value=raw, default=default.value)
        return default
