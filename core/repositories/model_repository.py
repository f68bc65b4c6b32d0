# =============================================================================
# core/repositories/model_repository.py - models table
# =============================================================================
# Besides plain CRUD this repository owns the two database-side functions
# (see supabase/schema.sql):
# - increment_model_downloads(model_id): atomic downloads = downloads + 1
# - sum_model_downloads(): COALESCE(SUM(downloads), 0)
# =============================================================================

import logging
from uuid import UUID

from core.models.model import Model, ModelStatus, UpdateStatus
from lib.utils import normalize_uuid

from .base import BaseRepository

logger = logging.getLogger(__name__)


def _listed(query):
    return query.eq("status", ModelStatus.APPROVED.value).eq("is_public", True)


_LIKE_ESCAPES = str.maketrans({"\\": "\\\\", "%": "\\%", "_": "\\_"})


def contains_pattern(term: str) -> str:
    """
    ILIKE pattern matching term as a literal substring.

    PostgREST turns every "*" into "%" before the query reaches Postgres and
    offers no escape for it, so a star in the term matches any single
    character.

    Example:
        contains_pattern("100%_off")  # "%100\\%\\_off%"
    """
    return "%" + term.translate(_LIKE_ESCAPES).replace("*", "_") + "%"


class ModelRepository(BaseRepository[Model]):
    table = "models"
    record_type = Model

    def list_public(
        self,
        page: int,
        page_size: int,
        search: str | None = None,
    ) -> tuple[list[Model], int]:
        """Approved public models, optionally filtered by a case-insensitive title substring."""
        def filters(query):
            query = _listed(query)
            if search:
                query = query.ilike("title", contains_pattern(search))
            return query

        return self._paginate(page, page_size, filters)

    def list_by_owner(
        self,
        owner_id: UUID | str,
        page: int,
        page_size: int,
        listed_only: bool = False,
    ) -> tuple[list[Model], int]:
        def filters(query):
            query = query.eq("user_id", normalize_uuid(owner_id))
            return _listed(query) if listed_only else query

        return self._paginate(page, page_size, filters)

    def list_all_by_owner(self, owner_id: UUID | str, batch_size: int = 1000) -> list[Model]:
        """Every model of an owner, fetched page by page."""
        models: list[Model] = []
        page = 1
        while True:
            batch, _ = self.list_by_owner(owner_id, page, batch_size)
            models.extend(batch)
            if len(batch) < batch_size:
                return models
            page += 1

    def list_pending(self, page: int, page_size: int) -> tuple[list[Model], int]:
        return self._paginate(page, page_size, lambda q: q.eq("status", ModelStatus.PENDING.value))

    def list_pending_updates(self, page: int, page_size: int) -> tuple[list[Model], int]:
        return self._paginate(
            page, page_size,
            lambda q: q.eq("update_status", UpdateStatus.PENDING_REVIEW.value),
        )

    def count_by_status(self, status: ModelStatus) -> int:
        return self._count(lambda q: q.eq("status", status.value))

    def count_pending_updates(self) -> int:
        return self._count(lambda q: q.eq("update_status", UpdateStatus.PENDING_REVIEW.value))

    def increment_downloads(self, model_id: UUID | str) -> int | None:
        """
        Atomically add one to a model's download counter.

        Returns:
            The new counter value, or None if the model does not exist
        """
        query = self._client.rpc(
            "increment_model_downloads", {"model_id": normalize_uuid(model_id)}
        )
        response = self._execute(query, "increment downloads")
        return response.data

    def sum_downloads(self) -> int:
        response = self._execute(self._client.rpc("sum_model_downloads", {}), "sum downloads")
        return int(response.data or 0)
