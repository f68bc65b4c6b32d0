# =============================================================================
# core/services/model_service.py - Model Business Logic
# =============================================================================
# Create / get / delete models and the admin moderation queues.
# Edits go through ModerationService; public reads through CatalogService.
# =============================================================================

import logging
from uuid import UUID

from app.config import Settings
from app.exceptions import NotFoundError
from core.access import Actor, ensure_owner_or_admin
from core.models.common import DeletionResult, Page
from core.models.model import Model, ModelCreate, ModelStatus, UpdateStatus
from core.repositories import ModelRepository
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class ModelService:
    """
    Service for model record management.

    Provides a clean interface between API routes and the models table.
    """

    def __init__(self, models: ModelRepository, storage: StorageService, settings: Settings):
        self._models = models
        self._storage = storage
        self._settings = settings

    def create(self, owner: Actor, data: ModelCreate) -> Model:
        """
        Create a model owned by the caller.

        New models always start unpublished with no pending edit, whoever
        creates them.
        """
        model = self._models.create({
            **data.model_dump(),
            "user_id": owner.id,
            "status": ModelStatus.PENDING,
            "update_status": UpdateStatus.IDLE,
            "pending_changes": None,
            "downloads": 0,
        })
        logger.info(f"Created model: {model.id} for user: {owner.id}")
        return model

    def get(self, model_id: UUID | str) -> Model:
        """
        Raises:
            NotFoundError: If the model doesn't exist
        """
        model = self._models.find_by_id(model_id)
        if model is None:
            raise NotFoundError("model", model_id)
        return model

    def delete(self, model_id: UUID | str, requester: Actor) -> DeletionResult:
        """
        Delete a model record, then remove its files.

        File removal is best-effort and never undoes or blocks the record
        deletion; failures are reported in the result.

        Raises:
            NotFoundError: If the model doesn't exist
            UnauthorizedError: If requester is neither owner nor admin
        """
        model = self.get(model_id)
        ensure_owner_or_admin(requester, model.user_id, "model")

        if not self._models.delete(model.id):
            raise NotFoundError("model", model_id)
        logger.info(f"Deleted model: {model.id} (by {requester.id})")

        cleanup = self._storage.remove_model_files(model)
        if not cleanup.ok:
            logger.warning(f"Model {model.id} deleted but file cleanup failed: {cleanup.failed}")
        return DeletionResult(deleted_id=model.id, cleanup=cleanup)

    # -------------------------------------------------------------------------
    # Moderation queues
    # -------------------------------------------------------------------------

    def list_pending(self, page: int = 1, page_size: int | None = None) -> Page[Model]:
        """Models awaiting their first publication decision."""
        page_size = self._settings.clamp_page_size(page_size)
        items, total = self._models.list_pending(page, page_size)
        return Page.build(items, total, page, page_size)

    def list_pending_updates(self, page: int = 1, page_size: int | None = None) -> Page[Model]:
        """Models with a staged edit awaiting review."""
        page_size = self._settings.clamp_page_size(page_size)
        items, total = self._models.list_pending_updates(page, page_size)
        return Page.build(items, total, page, page_size)
