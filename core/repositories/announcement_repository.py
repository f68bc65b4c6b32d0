# =============================================================================
# core/repositories/announcement_repository.py - announcements table
# =============================================================================

from core.models.announcement import Announcement

from .base import BaseRepository


class AnnouncementRepository(BaseRepository[Announcement]):
    table = "announcements"
    record_type = Announcement

    def list_active(self) -> list[Announcement]:
        query = self._query().select("*").eq("is_active", True).order("created_at", desc=True)
        response = self._execute(query, "list active")
        return [self._to_record(row) for row in response.data or []]

    def list_all(self, page: int, page_size: int) -> tuple[list[Announcement], int]:
        return self._paginate(page, page_size)
