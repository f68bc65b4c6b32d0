# =============================================================================
# core/services/announcement_service.py - Announcements
# =============================================================================
# Moderator-authored broadcasts. Reads are public; writes are admin-only.
# =============================================================================

import logging
from uuid import UUID

from app.config import Settings
from app.exceptions import NotFoundError
from core.access import Actor, require_admin
from core.models.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from core.models.common import Page
from core.repositories import AnnouncementRepository

logger = logging.getLogger(__name__)


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository, settings: Settings):
        self._announcements = announcements
        self._settings = settings

    def get(self, announcement_id: UUID | str) -> Announcement:
        announcement = self._announcements.find_by_id(announcement_id)
        if announcement is None:
            raise NotFoundError("announcement", announcement_id)
        return announcement

    def list_active(self) -> list[Announcement]:
        return self._announcements.list_active()

    def list_all(self, actor: Actor, page: int = 1, page_size: int | None = None) -> Page[Announcement]:
        require_admin(actor)
        page_size = self._settings.clamp_page_size(page_size)
        items, total = self._announcements.list_all(page, page_size)
        return Page.build(items, total, page, page_size)

    def create(self, actor: Actor, data: AnnouncementCreate) -> Announcement:
        require_admin(actor)
        announcement = self._announcements.create({**data.model_dump(), "is_active": True})
        logger.info(f"Announcement {announcement.id} created by {actor.id}")
        return announcement

    def update(self, actor: Actor, announcement_id: UUID | str, data: AnnouncementUpdate) -> Announcement:
        require_admin(actor)
        announcement = self.get(announcement_id)
        changes = data.model_dump(exclude_none=True)
        if not changes:
            return announcement
        updated = self._announcements.update(announcement.id, changes)
        if updated is None:
            raise NotFoundError("announcement", announcement_id)
        return updated

    def delete(self, actor: Actor, announcement_id: UUID | str) -> None:
        require_admin(actor)
        if not self._announcements.delete(announcement_id):
            raise NotFoundError("announcement", announcement_id)
        logger.info(f"Announcement {announcement_id} deleted by {actor.id}")
