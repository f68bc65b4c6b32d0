# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Stores uploaded model files and images in Supabase Storage buckets under
# generated names, and removes them again when their owner record goes away.
#
# Removal is best-effort: each path is removed on its own and failures are
# collected into a CleanupReport instead of raised.
# =============================================================================

import logging
import os
from enum import Enum
from typing import Iterable
from uuid import uuid4

from pydantic import BaseModel
from supabase import Client

from app.config import Settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError
from core.models.common import CleanupReport
from core.models.model import Model

logger = logging.getLogger(__name__)

_EXTERNAL_PREFIXES = ("http://", "https://")


class StorageKind(str, Enum):
    MODEL = "model"
    IMAGE = "image"


class StoredFile(BaseModel):
    """Result of a successful upload."""
    file_path: str
    file_name: str
    file_size: int
    url: str | None = None


class StorageService:
    """
    Service for Supabase Storage operations.

    Model files go to the models bucket, images (previews, avatars) to the
    images bucket.
    """

    def __init__(self, settings: Settings, client: Client):
        self._settings = settings
        self._client = client

    def _bucket(self, kind: StorageKind) -> str:
        if kind == StorageKind.MODEL:
            return self._settings.MODELS_BUCKET
        return self._settings.IMAGES_BUCKET

    def _limits(self, kind: StorageKind) -> tuple[list[str], int]:
        if kind == StorageKind.MODEL:
            return self._settings.allowed_model_extensions_list, self._settings.max_upload_size_bytes
        return self._settings.allowed_image_extensions_list, self._settings.max_image_size_bytes

    def validate(self, kind: StorageKind, filename: str, size: int) -> str:
        """
        Check an upload against the per-kind extension list and size limit.

        Returns:
            The lower-cased file extension

        Raises:
            InvalidFileTypeError: If the extension is not allowed
            FileTooLargeError: If the file exceeds the size limit
        """
        allowed, max_bytes = self._limits(kind)
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in allowed:
            raise InvalidFileTypeError(filename or "", allowed)
        if size > max_bytes:
            raise FileTooLargeError(size / (1024 * 1024), max_bytes / (1024 * 1024))
        return ext

    def store(
        self,
        kind: StorageKind,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> StoredFile:
        """
        Validate and upload a file under a generated name.

        Args:
            kind: Which bucket and limits apply
            filename: Original client filename (only its extension is kept)
            content: File bytes
            content_type: MIME type reported by the client

        Returns:
            StoredFile with the storage path to persist on the record

        Raises:
            InvalidFileTypeError / FileTooLargeError: If validation fails
            StorageUploadError: If the upload fails
        """
        ext = self.validate(kind, filename, len(content))
        path = f"{uuid4()}{ext}"
        bucket = self._bucket(kind)

        try:
            self._client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type or "application/octet-stream"},
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Uploaded {kind.value} file to storage: {bucket}/{path}")

        url = self.public_url(kind, path) if kind == StorageKind.IMAGE else None
        return StoredFile(file_path=path, file_name=filename, file_size=len(content), url=url)

    def public_url(self, kind: StorageKind, path: str) -> str:
        return self._client.storage.from_(self._bucket(kind)).get_public_url(path)

    def download_url(self, path: str, expires_in: int = 3600) -> str | None:
        """Signed, expiring URL for a model file; None if signing fails."""
        try:
            signed = self._client.storage.from_(self._settings.MODELS_BUCKET).create_signed_url(
                path, expires_in
            )
        except Exception as e:
            logger.error(f"Failed to sign download URL for {path}: {e}")
            return None
        return signed.get("signedURL") or signed.get("signedUrl")

    def _public_prefix(self, kind: StorageKind) -> str:
        base = self._settings.SUPABASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/public/{self._bucket(kind)}/"

    def managed_path(self, kind: StorageKind, reference: str | None) -> str | None:
        """
        Map a stored reference (bucket path or our own public URL) to a
        bucket path. External URLs and empty values are not ours to delete.
        """
        if not reference:
            return None
        prefix = self._public_prefix(kind)
        if reference.startswith(prefix):
            return reference[len(prefix):].split("?", 1)[0] or None
        if reference.startswith(_EXTERNAL_PREFIXES):
            return None
        return reference.lstrip("/") or None

    def remove_paths(self, kind: StorageKind, references: Iterable[str | None]) -> CleanupReport:
        """
        Remove files one by one, collecting failures.

        Never raises: a failed removal is logged and reported.
        """
        bucket = self._bucket(kind)
        attempted: list[str] = []
        failed: list[str] = []

        for reference in references:
            path = self.managed_path(kind, reference)
            if path is None:
                continue
            attempted.append(path)
            try:
                self._client.storage.from_(bucket).remove([path])
                logger.info(f"Deleted file from storage: {bucket}/{path}")
            except Exception as e:
                logger.warning(f"Failed to delete {bucket}/{path}: {e}")
                failed.append(path)

        return CleanupReport(attempted=attempted, failed=failed)

    def remove_model_files(self, model: Model) -> CleanupReport:
        """Remove a model's file and preview image, including any staged replacements."""
        files = [model.file_path]
        images = [model.image_url]
        if model.pending_changes is not None:
            files.append(model.pending_changes.file_path)
            images.append(model.pending_changes.image_url)

        return self.remove_paths(StorageKind.MODEL, files).merge(
            self.remove_paths(StorageKind.IMAGE, images)
        )
