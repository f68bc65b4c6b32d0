# =============================================================================
# app/routers/admin.py - Moderation and Administration Endpoints
# =============================================================================
# Every route here requires an admin token (the router is mounted with the
# require_admin_user dependency). Role grants additionally require the
# super admin; ban/unban/delete follow the tier rules in core.access.
#
# Model review has two entry points:
# - /models/{id}/approve|reject decides publication, or resolves a pending
#   edit if the model has one
# - /models/{id}/edit-review/approve|reject only resolves a pending edit
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from app.auth import AdminUser
from app.dependencies import (
    AdminServiceDep,
    AnnouncementServiceDep,
    ModelServiceDep,
    ModerationDep,
    UserServiceDep,
)
from core.models.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from core.models.common import AdminStats, DeletionResult, Page
from core.models.model import Model, RejectRequest
from core.models.user import (
    BanRequest,
    ProfilePatch,
    PublicProfile,
    Role,
    RoleUpdateRequest,
    UserResponse,
)

router = APIRouter()

ModelId = Annotated[UUID, Path(description="Model UUID")]
UserId = Annotated[UUID, Path(description="User UUID")]
PageNum = Annotated[int, Query(ge=1, description="Page number")]
PageSize = Annotated[int | None, Query(ge=1, description="Items per page")]


def _users_page(page: Page) -> Page[UserResponse]:
    return Page[UserResponse](
        items=[UserResponse.from_user(user) for user in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
    )


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/stats", response_model=AdminStats)
async def get_stats(user: AdminUser, admin: AdminServiceDep):
    return admin.stats(user)


@router.get("/super-admin", response_model=PublicProfile)
async def get_super_admin(admin: AdminServiceDep):
    return PublicProfile.from_user(admin.get_super_admin())


# =============================================================================
# Model Review
# =============================================================================

@router.get("/models/pending", response_model=Page[Model])
async def list_pending_models(models: ModelServiceDep, page: PageNum = 1, page_size: PageSize = None):
    """Models awaiting their first publication decision."""
    return models.list_pending(page=page, page_size=page_size)


@router.get("/models/pending-updates", response_model=Page[Model])
async def list_pending_updates(models: ModelServiceDep, page: PageNum = 1, page_size: PageSize = None):
    """Models with an owner edit awaiting review."""
    return models.list_pending_updates(page=page, page_size=page_size)


@router.put("/models/{model_id}/approve", response_model=Model)
async def approve_model(model_id: ModelId, moderation: ModerationDep):
    """
    Approve a model.

    If the model has an edit pending review this approves the edit
    (materializes the staged changes) rather than the publication.
    """
    return moderation.decide_model_publication(model_id, approve=True)


@router.put("/models/{model_id}/reject", response_model=Model)
async def reject_model(model_id: ModelId, request: RejectRequest, moderation: ModerationDep):
    """
    Reject a model.

    If the model has an edit pending review this discards the edit and
    leaves the publication state alone.
    """
    return moderation.decide_model_publication(model_id, approve=False, reason=request.reason)


@router.put("/models/{model_id}/edit-review/approve", response_model=Model)
async def approve_model_edit(model_id: ModelId, moderation: ModerationDep):
    """
    Raises:
        409: No edit pending review
    """
    return moderation.decide_model_edit_review(model_id, approve=True)


@router.put("/models/{model_id}/edit-review/reject", response_model=Model)
async def reject_model_edit(model_id: ModelId, request: RejectRequest, moderation: ModerationDep):
    return moderation.decide_model_edit_review(model_id, approve=False, reason=request.reason)


# =============================================================================
# Users
# =============================================================================

@router.get("/users", response_model=Page[UserResponse])
async def list_users(
    user: AdminUser,
    admin: AdminServiceDep,
    page: PageNum = 1,
    page_size: PageSize = None,
    role: Annotated[Role | None, Query(description="Filter by role")] = None,
):
    return _users_page(admin.list_users(user, page=page, page_size=page_size, role=role))


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: UserId,
    request: RoleUpdateRequest,
    user: AdminUser,
    admin: AdminServiceDep,
):
    """
    Set a user's role. Super admin only; nobody can be made super admin.

    The change takes effect on the target's next token.
    """
    return UserResponse.from_user(admin.change_role(user, user_id, request.role))


@router.put("/users/{user_id}/admin", response_model=UserResponse)
async def grant_admin(user_id: UserId, user: AdminUser, admin: AdminServiceDep):
    return UserResponse.from_user(admin.grant_admin(user, user_id))


@router.delete("/users/{user_id}/admin", response_model=UserResponse)
async def revoke_admin(user_id: UserId, user: AdminUser, admin: AdminServiceDep):
    return UserResponse.from_user(admin.revoke_admin(user, user_id))


@router.put("/users/{user_id}/ban", response_model=UserResponse)
async def ban_user(user_id: UserId, request: BanRequest, user: AdminUser, admin: AdminServiceDep):
    """
    Ban a user.

    Raises:
        403: Target is the super admin, or an admin and the caller is not
            the super admin
    """
    return UserResponse.from_user(admin.ban(user, user_id, request.reason))


@router.put("/users/{user_id}/unban", response_model=UserResponse)
async def unban_user(user_id: UserId, user: AdminUser, admin: AdminServiceDep):
    return UserResponse.from_user(admin.unban(user, user_id))


@router.delete("/users/{user_id}", response_model=DeletionResult)
async def delete_user(user_id: UserId, user: AdminUser, admin: AdminServiceDep):
    """Delete a user with their models; file cleanup failures are reported, not raised."""
    return admin.delete_user(user, user_id)


@router.put("/users/{user_id}/profile", response_model=UserResponse)
async def edit_user_profile(
    user_id: UserId,
    patch: ProfilePatch,
    user: AdminUser,
    moderation: ModerationDep,
):
    """Edit any user's profile directly, bypassing review."""
    return UserResponse.from_user(moderation.propose_profile_edit(user_id, user, patch))


# =============================================================================
# Profile Review
# =============================================================================

@router.get("/profiles/pending", response_model=Page[UserResponse])
async def list_pending_profiles(users: UserServiceDep, page: PageNum = 1, page_size: PageSize = None):
    return _users_page(users.list_pending_profiles(page=page, page_size=page_size))


@router.put("/profiles/{user_id}/approve", response_model=UserResponse)
async def approve_profile(user_id: UserId, moderation: ModerationDep):
    return UserResponse.from_user(moderation.decide_profile_review(user_id, approve=True))


@router.put("/profiles/{user_id}/reject", response_model=UserResponse)
async def reject_profile(user_id: UserId, moderation: ModerationDep):
    """Discard the staged changes; the profile goes back to approved."""
    return UserResponse.from_user(moderation.decide_profile_review(user_id, approve=False))


# =============================================================================
# Announcements
# =============================================================================

@router.post("/announcements", response_model=Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreate,
    user: AdminUser,
    announcements: AnnouncementServiceDep,
):
    return announcements.create(user, data)


@router.put("/announcements/{announcement_id}", response_model=Announcement)
async def update_announcement(
    announcement_id: Annotated[UUID, Path(description="Announcement UUID")],
    data: AnnouncementUpdate,
    user: AdminUser,
    announcements: AnnouncementServiceDep,
):
    return announcements.update(user, announcement_id, data)


@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: Annotated[UUID, Path(description="Announcement UUID")],
    user: AdminUser,
    announcements: AnnouncementServiceDep,
):
    announcements.delete(user, announcement_id)
