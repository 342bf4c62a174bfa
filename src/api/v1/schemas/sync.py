"""Pydantic schemas for Sync API."""

from pydantic import BaseModel

from domain.entities.sync import SyncState


class SyncStatusResponse(BaseModel):
    state: SyncState
    message: str | None = None
