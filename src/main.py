"""Main FastAPI application entry point."""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import (
    get_preferences_service,
    get_reminder_scheduler,
    get_sync_gateway,
    get_sync_service,
)
from core.config import settings
from core.logging import setup_logging
from domain.entities.sync import SyncStatus
from domain.events import TaskExpired
from domain.services.reminder_scheduler import run_expiry_sweep
from infrastructure.database.session import create_schema

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


def _log_expired(event: TaskExpired) -> None:
    # Repeats every sweep until the task is completed or deleted; the sweep
    # itself logs one info summary.
    logger.debug(
        "task_expired",
        task_id=str(event.task_id),
        title=event.title,
        due_date=event.due_date.isoformat(),
    )


def _log_sync_status(status: SyncStatus) -> None:
    logger.info("sync_status_changed", state=status.state.value, message=status.message)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    await create_schema()
    await get_preferences_service().load()

    scheduler = get_reminder_scheduler()
    sync_service = get_sync_service()
    unsubscribe_expired = scheduler.expired_events.subscribe(_log_expired)
    unsubscribe_sync = sync_service.status_changes.subscribe(_log_sync_status)

    sweep_task = asyncio.create_task(
        run_expiry_sweep(scheduler, settings.expiry_sweep_interval_seconds)
    )
    yield
    sweep_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep_task

    unsubscribe_expired()
    unsubscribe_sync()
    await sync_service.wait_idle()
    gateway = get_sync_gateway()
    if gateway is not None:
        await gateway.aclose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Personal To-Do List\n\n"
            "Taskminder keeps a personal task list with due dates, "
            "reminders before each deadline and optional remote sync.\n\n"
            "### Features\n"
            "- **Lifecycle**: tasks are active, completed or expired; "
            "completion is one-way\n"
            "- **Views**: filter by state and get per-state statistics\n"
            "- **Reminders**: 15 min, 1 h, 6 h and 12 h before the deadline, "
            "plus 08:00 on the due day\n"
            "- **Sync**: best-effort background sync, never blocks local changes"
        ),
        version=API_VERSION,
        debug=settings.debug,
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "tasks",
                "description": "Task lifecycle, views and reminders",
            },
            {
                "name": "preferences",
                "description": "Saved filter and theme",
            },
            {
                "name": "sync",
                "description": "Remote sync status and trigger",
            },
        ],
    )

    # Tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
