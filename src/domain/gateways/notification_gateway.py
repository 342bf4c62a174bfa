"""Notification delivery gateway protocol."""

from datetime import datetime
from typing import Protocol


class INotificationGateway(Protocol):
    """Local notification delivery service.

    Implementations silently ignore schedule requests whose ``fire_at`` is
    not in the future.
    """

    def schedule(self, identifier: str, fire_at: datetime, title: str, body: str) -> None:
        """Schedule (or replace) a pending notification under ``identifier``."""
        ...

    def cancel(self, identifiers: set[str]) -> None:
        """Drop any pending notifications with the given identifiers."""
        ...

    def pending_identifiers(self) -> set[str]:
        """Identifiers that are currently waiting to fire."""
        ...
