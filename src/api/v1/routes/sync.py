"""Remote sync API routes."""

from fastapi import APIRouter, Depends, status

from api.v1.dependencies import get_sync_service
from api.v1.schemas.sync import SyncStatusResponse
from domain.services.sync_service import SyncService

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatusResponse, summary="Current sync status")
async def get_sync_status(
    service: SyncService = Depends(get_sync_service),
) -> SyncStatusResponse:
    current = service.status
    return SyncStatusResponse(state=current.state, message=current.message)


@router.post(
    "",
    response_model=SyncStatusResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Request a sync now",
)
async def request_sync(
    service: SyncService = Depends(get_sync_service),
) -> SyncStatusResponse:
    """Starts a background sync and returns immediately. Poll `/sync/status` for the result."""
    service.request_sync()
    current = service.status
    return SyncStatusResponse(state=current.state, message=current.message)
