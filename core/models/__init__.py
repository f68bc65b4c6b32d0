# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - patch.py: Patch base type and apply_patch() shared by both review flows
# - user.py: User record, Role tiers, profile review state
# - model.py: Model record, publication/edit review state
# - favorite.py: (user, model) favorites
# - announcement.py: Moderator-authored announcements
# - common.py: Page, CleanupReport, DeletionResult, AdminStats
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Patches - Staged changes awaiting review
# -----------------------------------------------------------------------------
from .patch import Patch, apply_patch

# -----------------------------------------------------------------------------
# User Models - Identity, roles and profile review
# -----------------------------------------------------------------------------
from .user import (
    BanRequest,
    ChangeEmailRequest,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfilePatch,
    ProfileStatus,
    PublicProfile,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Role,
    RoleUpdateRequest,
    User,
    UserResponse,
)

# -----------------------------------------------------------------------------
# Model Models - Uploaded artifacts and their moderation state
# -----------------------------------------------------------------------------
from .model import (
    DownloadInfo,
    Model,
    ModelCreate,
    ModelDetail,
    ModelPatch,
    ModelStatus,
    ModelView,
    PublicModel,
    RejectRequest,
    UpdateStatus,
)

# -----------------------------------------------------------------------------
# Favorites & Announcements
# -----------------------------------------------------------------------------
from .favorite import Favorite, FavoriteStatus
from .announcement import Announcement, AnnouncementCreate, AnnouncementUpdate

# -----------------------------------------------------------------------------
# Shared results
# -----------------------------------------------------------------------------
from .common import AdminStats, CleanupReport, DeletionResult, MessageResponse, Page

__all__ = [
    # Patches
    "Patch",
    "apply_patch",
    # Users
    "BanRequest",
    "ChangeEmailRequest",
    "ChangePasswordRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "ProfilePatch",
    "ProfileStatus",
    "PublicProfile",
    "RefreshRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "Role",
    "RoleUpdateRequest",
    "User",
    "UserResponse",
    # Models
    "DownloadInfo",
    "Model",
    "ModelCreate",
    "ModelDetail",
    "ModelPatch",
    "ModelStatus",
    "ModelView",
    "PublicModel",
    "RejectRequest",
    "UpdateStatus",
    # Favorites & Announcements
    "Favorite",
    "FavoriteStatus",
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    # Results
    "AdminStats",
    "CleanupReport",
    "DeletionResult",
    "MessageResponse",
    "Page",
]
