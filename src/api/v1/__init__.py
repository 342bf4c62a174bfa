"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.preferences import router as preferences_router
from api.v1.routes.sync import router as sync_router
from api.v1.routes.tasks import router as tasks_router

router = APIRouter()
router.include_router(tasks_router)
router.include_router(preferences_router)
router.include_router(sync_router)
