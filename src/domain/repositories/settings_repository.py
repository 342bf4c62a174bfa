"""Key-value settings store protocol."""

from typing import Protocol


class ISettingsRepository(Protocol):
    """Repository interface for persisted user settings."""

    async def get(self, key: str) -> str | None:
        """Get the stored value for a key, or None if unset."""
        ...

    async def get_many(self, keys: list[str]) -> dict[str, str]:
        """Get stored values for several keys. Unset keys are omitted."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Insert or overwrite a value."""
        ...
