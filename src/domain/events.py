"""Observer registration and domain events."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

import structlog

logger = structlog.get_logger()

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class TaskExpired:
    """Emitted by the expiry sweep for every overdue, uncompleted task."""

    task_id: UUID
    title: str
    due_date: datetime
    detected_at: datetime


class EventEmitter(Generic[E]):
    """Synchronous fan-out to registered listeners.

    A failing listener is logged and does not stop delivery to the others.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._listeners: list[Callable[[E], None]] = []

    def subscribe(self, listener: Callable[[E], None]) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: E) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("event_listener_failed", emitter=self._name)

    def __len__(self) -> int:
        return len(self._listeners)
