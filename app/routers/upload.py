# =============================================================================
# app/routers/upload.py - File Uploads
# =============================================================================
# Uploads model files and images to Supabase Storage. The returned
# file_path / url is then referenced when creating or editing a model.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from app.auth import CurrentUser
from app.dependencies import StorageDep
from core.services.storage_service import StorageKind, StoredFile

logger = logging.getLogger(__name__)

router = APIRouter()


async def _store(storage, kind: StorageKind, file: UploadFile) -> StoredFile:
    content = await file.read()
    return storage.store(kind, file.filename or "", content, file.content_type)


@router.post("/model", response_model=StoredFile)
async def upload_model(
    file: Annotated[UploadFile, File(description="Model file (.ysm or .zip)")],
    user: CurrentUser,
    storage: StorageDep,
):
    """
    Upload a model file.

    Raises:
        400: Wrong file type or file too large
    """
    stored = await _store(storage, StorageKind.MODEL, file)
    logger.info(f"User {user.id} uploaded model file {stored.file_path} ({stored.file_size} bytes)")
    return stored


@router.post("/image", response_model=StoredFile)
async def upload_image(
    file: Annotated[UploadFile, File(description="Preview image or avatar")],
    user: CurrentUser,
    storage: StorageDep,
):
    """
    Upload an image. Images are limited to a tenth of the model file size.

    Raises:
        400: Wrong file type or file too large
    """
    stored = await _store(storage, StorageKind.IMAGE, file)
    logger.info(f"User {user.id} uploaded image {stored.file_path}")
    return stored
