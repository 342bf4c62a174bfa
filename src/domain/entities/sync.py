"""Remote sync status value object."""

from dataclasses import dataclass
from enum import StrEnum


class SyncState(StrEnum):
    UNKNOWN = "unknown"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SyncStatus:
    """Observable status of the background sync. ``message`` is set only on error."""

    state: SyncState = SyncState.UNKNOWN
    message: str | None = None

    @classmethod
    def unknown(cls) -> "SyncStatus":
        return cls(SyncState.UNKNOWN)

    @classmethod
    def syncing(cls) -> "SyncStatus":
        return cls(SyncState.SYNCING)

    @classmethod
    def synced(cls) -> "SyncStatus":
        return cls(SyncState.SYNCED)

    @classmethod
    def error(cls, message: str) -> "SyncStatus":
        return cls(SyncState.ERROR, message)
