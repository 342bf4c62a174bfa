"""Remote sync gateway protocol."""

from typing import Protocol

from domain.entities.task import Task


class ISyncGateway(Protocol):
    """Remote copy of the task collection."""

    async def sync_now(self, tasks: list[Task]) -> None:
        """Push the full local snapshot. Idempotent.

        Raises:
            SyncError: if the remote service could not be reached or refused the snapshot.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
