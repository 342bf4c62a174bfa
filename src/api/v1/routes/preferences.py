"""Preferences API routes."""

from fastapi import APIRouter, Depends

from api.v1.dependencies import get_preferences_service
from api.v1.schemas.preferences import PreferencesResponse, PreferencesUpdate
from domain.entities.preferences import Preferences
from domain.services.preferences_service import PreferencesService

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=PreferencesResponse, summary="Get saved preferences")
async def get_preferences(
    service: PreferencesService = Depends(get_preferences_service),
) -> PreferencesResponse:
    return _build_response(await service.get())


@router.patch("", response_model=PreferencesResponse, summary="Change preferences")
async def update_preferences(
    body: PreferencesUpdate,
    service: PreferencesService = Depends(get_preferences_service),
) -> PreferencesResponse:
    """Every provided field is written to the settings store immediately."""
    prefs = await service.get()
    if body.selected_filter is not None:
        prefs = await service.set_filter(body.selected_filter)
    if body.theme is not None:
        prefs = await service.set_theme(body.theme)
    return _build_response(prefs)


def _build_response(prefs: Preferences) -> PreferencesResponse:
    return PreferencesResponse(selected_filter=prefs.selected_filter, theme=prefs.theme)
