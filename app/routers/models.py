# =============================================================================
# app/routers/models.py - Model Catalog Endpoints
# =============================================================================
# Browse, create, edit, delete, download and favorite models.
#
# Edits by the owner are staged for admin review; see
# core.services.moderation_service for the state machine.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from app.auth import CurrentUser, OptionalUser
from app.dependencies import (
    CatalogDep,
    FavoriteServiceDep,
    ModelServiceDep,
    ModerationDep,
    StorageDep,
)
from core.models.common import DeletionResult, MessageResponse, Page
from core.models.favorite import FavoriteStatus
from core.models.model import DownloadInfo, Model, ModelCreate, ModelDetail, ModelPatch, PublicModel
from core.services.catalog_service import view_for

router = APIRouter()

ModelId = Annotated[UUID, Path(description="Model UUID")]


@router.get("", response_model=Page[PublicModel])
async def list_models(
    catalog: CatalogDep,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, description="Items per page")] = None,
    search: Annotated[str | None, Query(max_length=100, description="Title contains (case-insensitive)")] = None,
):
    """
    List published models, newest first.

    Only models that are approved and public are listed; review state is
    not included.
    """
    return catalog.list_public(page=page, page_size=page_size, search=search)


@router.get("/{model_id}", response_model=ModelDetail)
async def get_model(
    model_id: ModelId,
    catalog: CatalogDep,
    favorites: FavoriteServiceDep,
    viewer: OptionalUser,
):
    """
    Model details.

    Unpublished or private models are only visible to their owner and admins,
    and only they see the review state (staged edit, rejection reason).
    """
    model = catalog.get_visible(model_id, viewer)
    return ModelDetail(
        model=view_for(model, viewer),
        favorite_count=favorites.count_for_model(model.id),
        is_favorited=favorites.is_favorited(viewer.id, model.id) if viewer else None,
    )


@router.post("", response_model=Model, status_code=status.HTTP_201_CREATED)
async def create_model(data: ModelCreate, user: CurrentUser, models: ModelServiceDep):
    """
    Create a model from previously uploaded files.

    The model starts as pending and is not listed until an admin approves it.
    """
    return models.create(user, data)


@router.put("/{model_id}", response_model=Model)
async def update_model(
    model_id: ModelId,
    patch: ModelPatch,
    user: CurrentUser,
    moderation: ModerationDep,
):
    """
    Edit a model.

    Owner edits are staged (update_status = pending_review) and replace any
    previously staged edit. Admin edits apply immediately.

    Raises:
        403: Caller is neither the owner nor an admin
        404: Model not found
    """
    return moderation.propose_model_edit(model_id, user, patch)


@router.delete("/{model_id}", response_model=DeletionResult)
async def delete_model(model_id: ModelId, user: CurrentUser, models: ModelServiceDep):
    """
    Delete a model and, best-effort, its files.

    The response lists any file that could not be removed.
    """
    return models.delete(model_id, user)


@router.post("/{model_id}/download", response_model=DownloadInfo)
async def download_model(
    model_id: ModelId,
    catalog: CatalogDep,
    storage: StorageDep,
    viewer: OptionalUser,
):
    """
    Count a download and return where to fetch the file.

    Every request counts; there is no per-user deduplication. Callers who
    may not see the model get the new count but no file or URL.
    """
    info = catalog.record_download(model_id, viewer)
    if info.file_path is None:
        return info
    return info.model_copy(update={"url": storage.download_url(info.file_path)})


# =============================================================================
# Favorites
# =============================================================================

@router.post("/{model_id}/favorite", response_model=FavoriteStatus)
async def add_favorite(model_id: ModelId, user: CurrentUser, favorites: FavoriteServiceDep):
    favorites.add(user.id, model_id)
    return FavoriteStatus(model_id=model_id, is_favorited=True)


@router.delete("/{model_id}/favorite", response_model=FavoriteStatus)
async def remove_favorite(model_id: ModelId, user: CurrentUser, favorites: FavoriteServiceDep):
    favorites.remove(user.id, model_id)
    return FavoriteStatus(model_id=model_id, is_favorited=False)


@router.get("/{model_id}/favorite", response_model=FavoriteStatus)
async def check_favorite(model_id: ModelId, user: CurrentUser, favorites: FavoriteServiceDep):
    return FavoriteStatus(model_id=model_id, is_favorited=favorites.is_favorited(user.id, model_id))
