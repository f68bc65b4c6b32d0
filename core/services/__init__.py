# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageKind, StorageService, StoredFile
from .notification_service import NotificationService
from .moderation_service import ModerationService
from .catalog_service import CatalogService
from .model_service import ModelService
from .user_service import UserService
from .admin_service import AdminService
from .favorite_service import FavoriteService
from .announcement_service import AnnouncementService

__all__ = [
    "StorageKind",
    "StorageService",
    "StoredFile",
    "NotificationService",
    "ModerationService",
    "CatalogService",
    "ModelService",
    "UserService",
    "AdminService",
    "FavoriteService",
    "AnnouncementService",
]
