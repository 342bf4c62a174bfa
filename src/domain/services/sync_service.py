"""Background remote sync with an observable status."""

import asyncio
from collections.abc import Callable

import structlog

from core.exceptions import SyncError
from domain.entities.sync import SyncStatus
from domain.events import EventEmitter
from domain.gateways.sync_gateway import ISyncGateway
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

NOT_CONFIGURED_MESSAGE = "Remote sync is not configured"


class SyncService:
    """Runs best-effort syncs as detached jobs.

    Nothing here raises into the caller of ``request_sync``: every outcome
    ends up in ``status`` and is pushed to ``status_changes`` listeners.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        gateway: ISyncGateway | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._status = SyncStatus.unknown()
        self._job: asyncio.Task[None] | None = None
        self._rerun = False
        self.status_changes: EventEmitter[SyncStatus] = EventEmitter("sync_status")

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._job is not None and not self._job.done()

    def request_sync(self) -> "asyncio.Task[None] | None":
        """Start a sync, or queue one follow-up run if a sync is in flight.

        The in-flight job may have read its snapshot before the caller's
        change was committed, so it runs once more after finishing. Any
        number of requests during one run collapse into a single rerun.

        Returns the running job, or None when sync is not configured.
        """
        if self._gateway is None:
            self._set_status(SyncStatus.error(NOT_CONFIGURED_MESSAGE))
            return None

        if self.is_running:
            self._rerun = True
            return self._job

        self._set_status(SyncStatus.syncing())
        self._job = asyncio.create_task(self._run(self._gateway), name="remote-sync")
        return self._job

    async def wait_idle(self) -> None:
        """Wait for the in-flight sync, if any, to settle."""
        if self._job is not None:
            await asyncio.gather(self._job, return_exceptions=True)

    async def _run(self, gateway: ISyncGateway) -> None:
        while True:
            self._rerun = False
            outcome = await self._sync_once(gateway)
            if not self._rerun:
                self._set_status(outcome)
                return
            logger.debug("sync_rerun", previous=outcome.state.value)

    async def _sync_once(self, gateway: ISyncGateway) -> SyncStatus:
        try:
            async with self._uow_factory() as uow:
                tasks = await uow.tasks.get_all()
            await gateway.sync_now(tasks)
        except SyncError as e:
            logger.warning("sync_failed", error=e.message)
            return SyncStatus.error(e.message)
        except Exception as e:
            logger.exception("sync_crashed")
            return SyncStatus.error(str(e) or type(e).__name__)
        logger.info("sync_completed", task_count=len(tasks))
        return SyncStatus.synced()

    def _set_status(self, status: SyncStatus) -> None:
        if status == self._status:
            return
        self._status = status
        self.status_changes.emit(status)
