# =============================================================================
# core/services/catalog_service.py - Public Catalog
# =============================================================================
# Listing, search, visibility filtering and download counting.
#
# A model is listed when status = approved and is_public = true. Unlisted
# models are only visible to their owner and to admins.
# =============================================================================

import logging
import os
from uuid import UUID

from app.config import Settings
from app.exceptions import NotFoundError
from core.access import Actor, is_admin
from core.models.common import Page
from core.models.model import DownloadInfo, Model, ModelView, PublicModel
from core.repositories import ModelRepository

logger = logging.getLogger(__name__)


def is_owner_or_admin(model: Model, viewer: Actor | None) -> bool:
    if viewer is None:
        return False
    return str(viewer.id) == str(model.user_id) or is_admin(viewer)


def can_view(model: Model, viewer: Actor | None) -> bool:
    return model.is_listed or is_owner_or_admin(model, viewer)


def view_for(model: Model, viewer: Actor | None) -> ModelView:
    """The model with its review state shown only to the owner and admins."""
    return ModelView.of(model, show_review=is_owner_or_admin(model, viewer))


def download_name(model: Model) -> str:
    """Suggested filename for a download: the title plus the stored extension."""
    ext = os.path.splitext(model.file_path)[1]
    stem = "".join(c if c.isalnum() or c in " -_." else "_" for c in model.title).strip()
    return f"{stem or model.id}{ext}"


class CatalogService:
    """Read side of the model catalog plus the download counter."""

    def __init__(self, models: ModelRepository, settings: Settings):
        self._models = models
        self._settings = settings

    def list_public(
        self,
        page: int = 1,
        page_size: int | None = None,
        search: str | None = None,
    ) -> Page[PublicModel]:
        """
        Approved public models, newest first, without review state.

        Args:
            page: 1-indexed page number
            page_size: Items per page (default and cap come from settings)
            search: Case-insensitive substring of the title
        """
        page_size = self._settings.clamp_page_size(page_size)
        search = search.strip() if search else None
        items, total = self._models.list_public(page, page_size, search or None)
        public = [PublicModel.model_validate(model.model_dump()) for model in items]
        return Page.build(public, total, page, page_size)

    def get_visible(self, model_id: UUID | str, viewer: Actor | None = None) -> Model:
        """
        Raises:
            NotFoundError: Model does not exist or the viewer may not see it
        """
        model = self._models.find_by_id(model_id)
        if model is None or not can_view(model, viewer):
            raise NotFoundError("model", model_id)
        return model

    def list_by_owner(
        self,
        owner_id: UUID | str,
        viewer: Actor | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[ModelView]:
        """
        The owner and admins see every model with its review state; everyone
        else only listed ones, without it.
        """
        page_size = self._settings.clamp_page_size(page_size)
        sees_all = viewer is not None and (str(viewer.id) == str(owner_id) or is_admin(viewer))
        items, total = self._models.list_by_owner(owner_id, page, page_size, listed_only=not sees_all)
        return Page.build([ModelView.of(m, show_review=sees_all) for m in items], total, page, page_size)

    def record_download(self, model_id: UUID | str, viewer: Actor | None = None) -> DownloadInfo:
        """
        Count one download and describe the file to fetch.

        Every call counts, whoever asks and whatever the model's visibility.
        The increment happens in the database, never as read-modify-write.
        The file path and name are only returned to viewers who may see the
        model; everyone else gets the new count alone.

        Raises:
            NotFoundError: Model does not exist
        """
        model = self._models.find_by_id(model_id)
        if model is None:
            raise NotFoundError("model", model_id)

        downloads = self._models.increment_downloads(model.id)
        if downloads is None:
            raise NotFoundError("model", model_id)

        logger.debug(f"Model {model.id} downloads: {downloads}")
        if not can_view(model, viewer):
            return DownloadInfo(model_id=model.id, downloads=downloads)
        return DownloadInfo(
            model_id=model.id,
            file_path=model.file_path,
            file_name=download_name(model),
            downloads=downloads,
        )
