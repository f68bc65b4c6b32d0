# =============================================================================
# core/models/favorite.py - Favorite Schemas
# =============================================================================
# A favorite is a unique (user, model) pair with no lifecycle of its own.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .model import PublicModel


class Favorite(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: UUID
    user_id: UUID
    model_id: UUID
    created_at: datetime | None = None

    # Embedded when listed for a user; review state is never included
    model: PublicModel | None = None


class FavoriteStatus(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: UUID
    is_favorited: bool
