# =============================================================================
# core/models/announcement.py - Announcement Schemas
# =============================================================================
# Moderator-authored broadcast records shown on the front page.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Announcement(BaseModel):
    id: UUID
    title: str
    content: str
    is_active: bool = True
    created_at: datetime | None = None


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class AnnouncementUpdate(BaseModel):
    """Partial update; only fields that are set are written."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None
