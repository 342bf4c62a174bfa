"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_notification_center, get_sync_service
from core.config import settings
from domain.services.sync_service import SyncService
from infrastructure.database.session import get_async_session
from infrastructure.notifications.local_notification_center import LocalNotificationCenter

API_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    sync: str | None = None
    pending_reminders: int | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Service liveness without touching any dependency."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=datetime.now().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    sync_service: SyncService = Depends(get_sync_service),
    center: LocalNotificationCenter = Depends(get_notification_center),
) -> HealthResponse:
    """
    Database connectivity plus sync and reminder state.

    A sync error does not degrade the status: the app works offline.
    """
    db_status = "unknown"

    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    overall_status = "healthy" if db_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        version=API_VERSION,
        timestamp=datetime.now().isoformat(),
        environment=settings.app_env,
        database=db_status,
        sync=sync_service.status.state.value,
        pending_reminders=len(center.pending_identifiers()),
    )
