# =============================================================================
# core/repositories/ - Persistence over Supabase tables
# =============================================================================
# One repository per table. Services receive repositories through their
# constructors so tests can substitute in-memory fakes.
# =============================================================================

from .base import BaseRepository, to_row
from .user_repository import UserRepository
from .model_repository import ModelRepository
from .favorite_repository import FavoriteRepository
from .announcement_repository import AnnouncementRepository

__all__ = [
    "BaseRepository",
    "to_row",
    "UserRepository",
    "ModelRepository",
    "FavoriteRepository",
    "AnnouncementRepository",
]
