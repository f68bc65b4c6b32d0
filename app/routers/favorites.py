# =============================================================================
# app/routers/favorites.py - The Caller's Favorites
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.auth import CurrentUser
from app.dependencies import FavoriteServiceDep
from core.models.common import Page
from core.models.favorite import Favorite

router = APIRouter()


@router.get("", response_model=Page[Favorite])
async def list_favorites(
    user: CurrentUser,
    favorites: FavoriteServiceDep,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, description="Items per page")] = None,
):
    """Favorited models of the caller, most recent first."""
    return favorites.list_for_user(user.id, page=page, page_size=page_size)
