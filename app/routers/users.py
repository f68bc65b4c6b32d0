# =============================================================================
# app/routers/users.py - Account and Profile Endpoints
# =============================================================================
# The caller's own account, profile edits (staged for review unless the
# caller is an admin) and public profiles.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from app.auth import CurrentUser, OptionalUser
from app.dependencies import CatalogDep, ModerationDep, UserServiceDep
from core.models.common import MessageResponse, Page
from core.models.model import ModelView
from core.models.user import ChangePasswordRequest, ProfilePatch, PublicProfile, UserResponse

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser, users: UserServiceDep):
    return UserResponse.from_user(users.get(user.id))


@router.put("/me", response_model=UserResponse)
async def update_me(patch: ProfilePatch, user: CurrentUser, moderation: ModerationDep):
    """
    Edit the caller's profile.

    For regular users the changes are staged as pending_changes and
    profile_status becomes pending_review until an admin decides; any
    previously staged edit is replaced. Admin edits apply immediately.

    Raises:
        409: Username already taken
    """
    updated = moderation.propose_profile_edit(user.id, user, patch)
    return UserResponse.from_user(updated)


@router.put("/me/password", response_model=MessageResponse)
async def change_password(request: ChangePasswordRequest, user: CurrentUser, users: UserServiceDep):
    users.change_password(user.id, request.old_password, request.new_password)
    return MessageResponse(message="Password changed")


@router.get("/{user_id}", response_model=PublicProfile)
async def get_user(
    user_id: Annotated[UUID, Path(description="User UUID")],
    users: UserServiceDep,
):
    """Public profile: no email, no pending changes."""
    return users.get_public_profile(user_id)


@router.get("/{user_id}/models", response_model=Page[ModelView])
async def get_user_models(
    user_id: Annotated[UUID, Path(description="User UUID")],
    catalog: CatalogDep,
    viewer: OptionalUser,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, description="Items per page")] = None,
):
    """
    A user's models.

    The owner and admins see every model with its review state; everyone
    else only approved public ones, without it.
    """
    return catalog.list_by_owner(user_id, viewer=viewer, page=page, page_size=page_size)
