# =============================================================================
# core/services/favorite_service.py - Favorites
# =============================================================================

import logging
from uuid import UUID

from app.config import Settings
from app.exceptions import NotFoundError
from core.models.common import Page
from core.models.favorite import Favorite
from core.repositories import FavoriteRepository, ModelRepository

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, favorites: FavoriteRepository, models: ModelRepository, settings: Settings):
        self._favorites = favorites
        self._models = models
        self._settings = settings

    def add(self, user_id: UUID | str, model_id: UUID | str) -> None:
        """Favorite a model; favoriting twice is a no-op."""
        if self._models.find_by_id(model_id) is None:
            raise NotFoundError("model", model_id)
        self._favorites.add(user_id, model_id)
        logger.debug(f"User {user_id} favorited model {model_id}")

    def remove(self, user_id: UUID | str, model_id: UUID | str) -> bool:
        return self._favorites.remove(user_id, model_id)

    def is_favorited(self, user_id: UUID | str, model_id: UUID | str) -> bool:
        return self._favorites.exists(user_id, model_id)

    def count_for_model(self, model_id: UUID | str) -> int:
        return self._favorites.count_for_model(model_id)

    def list_for_user(
        self,
        user_id: UUID | str,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[Favorite]:
        page_size = self._settings.clamp_page_size(page_size)
        items, total = self._favorites.list_for_user(user_id, page, page_size)
        return Page.build(items, total, page, page_size)
