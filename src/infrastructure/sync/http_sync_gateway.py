"""HTTP implementation of the remote sync gateway."""

from typing import Any

import httpx
import structlog

from core.exceptions import SyncError
from domain.entities.task import Task

logger = structlog.get_logger()


class HttpSyncGateway:
    """Pushes the full task snapshot to a remote service with ``PUT /tasks``.

    Replacing the whole collection makes repeated calls idempotent.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def sync_now(self, tasks: list[Task]) -> None:
        payload = {"tasks": [self._serialize(task) for task in tasks]}
        try:
            response = await self._client.put("/tasks", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SyncError(f"Remote rejected sync: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SyncError(f"Remote unreachable: {e}") from e

        logger.debug("sync_pushed", task_count=len(tasks), status_code=response.status_code)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _serialize(task: Task) -> dict[str, Any]:
        return {
            "id": str(task.id),
            "title": task.title,
            "description": task.description,
            "due_date": task.due_date.isoformat() if task.due_date else None,
            "is_completed": task.is_completed,
            "created_at": task.created_at.isoformat(),
            "updated_at": task.updated_at.isoformat(),
            "completed_at": task.completed_at.isoformat() if task.completed_at else None,
        }
