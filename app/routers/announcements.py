# =============================================================================
# app/routers/announcements.py - Announcement Reads
# =============================================================================
# Writes live under /admin/announcements.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from app.auth import AdminUser
from app.dependencies import AnnouncementServiceDep
from core.models.announcement import Announcement
from core.models.common import Page

router = APIRouter()


@router.get("", response_model=list[Announcement])
async def list_announcements(announcements: AnnouncementServiceDep):
    """Active announcements, newest first."""
    return announcements.list_active()


@router.get("/all", response_model=Page[Announcement])
async def list_all_announcements(
    user: AdminUser,
    announcements: AnnouncementServiceDep,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, description="Items per page")] = None,
):
    return announcements.list_all(user, page=page, page_size=page_size)


@router.get("/{announcement_id}", response_model=Announcement)
async def get_announcement(
    announcement_id: Annotated[UUID, Path(description="Announcement UUID")],
    announcements: AnnouncementServiceDep,
):
    return announcements.get(announcement_id)
