"""In-process notification delivery backed by asyncio timers."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

import structlog

logger = structlog.get_logger()


@dataclass
class PendingNotification:
    """A notification request waiting for its fire time."""

    identifier: str
    fire_at: datetime
    title: str
    body: str
    handle: asyncio.TimerHandle | None = field(default=None, repr=False, compare=False)


class LocalNotificationCenter:
    """Holds pending notification requests and fires them on the event loop.

    Scheduling an identifier that is already pending replaces the old
    request. Requests whose fire time is not in the future are ignored.
    Without a running event loop requests are only recorded.
    """

    def __init__(
        self,
        deliver: Callable[[PendingNotification], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._deliver = deliver
        self._clock = clock
        self._pending: dict[str, PendingNotification] = {}

    def schedule(self, identifier: str, fire_at: datetime, title: str, body: str) -> None:
        delay = (fire_at - self._clock()).total_seconds()
        if delay <= 0:
            logger.debug("notification_in_past_ignored", identifier=identifier)
            return

        self._drop(identifier)
        request = PendingNotification(identifier, fire_at, title, body)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            request.handle = loop.call_later(delay, self._fire, identifier)
        self._pending[identifier] = request
        logger.debug("notification_scheduled", identifier=identifier, fire_at=fire_at.isoformat())

    def cancel(self, identifiers: set[str]) -> None:
        removed = [identifier for identifier in identifiers if self._drop(identifier)]
        if removed:
            logger.debug("notifications_cancelled", identifiers=sorted(removed))

    def pending_identifiers(self) -> set[str]:
        return set(self._pending)

    def pending(self) -> list[PendingNotification]:
        """Pending requests ordered by fire time."""
        return sorted(self._pending.values(), key=lambda p: (p.fire_at, p.identifier))

    def clear(self) -> None:
        self.cancel(set(self._pending))

    def _drop(self, identifier: str) -> bool:
        request = self._pending.pop(identifier, None)
        if request is None:
            return False
        if request.handle is not None:
            request.handle.cancel()
        return True

    def _fire(self, identifier: str) -> None:
        request = self._pending.pop(identifier, None)
        if request is None:
            return

        logger.info("notification_delivered", identifier=identifier, title=request.title)
        if self._deliver:
            try:
                self._deliver(request)
            except Exception:
                logger.exception("notification_delivery_failed", identifier=identifier)
