# =============================================================================
# core/repositories/favorite_repository.py - favorites table
# =============================================================================

from uuid import UUID

from core.models.favorite import Favorite
from lib.utils import normalize_uuid

from .base import BaseRepository


class FavoriteRepository(BaseRepository[Favorite]):
    table = "favorites"
    record_type = Favorite

    def _pair(self, user_id: UUID | str, model_id: UUID | str):
        def filters(query):
            return query.eq("user_id", normalize_uuid(user_id)).eq("model_id", normalize_uuid(model_id))
        return filters

    def add(self, user_id: UUID | str, model_id: UUID | str) -> None:
        """Insert the pair; an existing pair is left as is."""
        row = {"user_id": normalize_uuid(user_id), "model_id": normalize_uuid(model_id)}
        query = self._query().upsert(row, on_conflict="user_id,model_id", ignore_duplicates=True)
        self._execute(query, "add favorite")

    def remove(self, user_id: UUID | str, model_id: UUID | str) -> bool:
        query = self._pair(user_id, model_id)(self._query().delete())
        response = self._execute(query, "remove favorite")
        return bool(response.data)

    def exists(self, user_id: UUID | str, model_id: UUID | str) -> bool:
        return self._count(self._pair(user_id, model_id)) > 0

    def list_for_user(self, user_id: UUID | str, page: int, page_size: int) -> tuple[list[Favorite], int]:
        """Favorites with the favorited model embedded."""
        return self._paginate(
            page, page_size,
            lambda q: q.eq("user_id", normalize_uuid(user_id)),
            columns="*, model:models(*)",
        )

    def count_for_model(self, model_id: UUID | str) -> int:
        return self._count(lambda q: q.eq("model_id", normalize_uuid(model_id)))
