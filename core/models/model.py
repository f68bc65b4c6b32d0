# =============================================================================
# core/models/model.py - Model Artifact Schemas
# =============================================================================
# A "model" is an uploaded artifact (file + metadata) owned by a user.
# It moves along two independent axes:
#
#   Publication (status):
#     pending --approve--> approved
#     pending --reject(reason)--> rejected
#
#   Edit review (update_status):
#     idle --propose (non-admin)--> pending_review
#     pending_review --approve--> idle (diff materialized)
#     pending_review --reject(reason)--> idle (diff discarded)
#
# A model can be approved and pending_review at the same time: published,
# with an edit awaiting review.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

from .patch import Patch


class ModelStatus(str, Enum):
    """Publication state."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UpdateStatus(str, Enum):
    """Edit review state."""
    IDLE = "idle"
    PENDING_REVIEW = "pending_review"


def _clean_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


# Stripped, non-empty, de-duplicated, order preserved
TagList = Annotated[list[str], AfterValidator(_clean_tags)]


class ModelPatch(Patch):
    """Proposed model changes awaiting review (or applied directly by an admin)."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    tags: TagList | None = None
    file_path: str | None = Field(default=None, min_length=1, max_length=500)
    file_size: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    is_public: bool | None = None


class PublicModel(BaseModel):
    """
    The fields anyone may see about a model.

    Review state (update_status, pending_changes, rejection_reason) is left
    out: it is shown only to the owner and to admins.
    """

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    file_path: str
    file_size: int = Field(default=0, ge=0)
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True
    status: ModelStatus = ModelStatus.PENDING
    downloads: int = Field(default=0, ge=0)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value):
        return [] if value is None else value

    @property
    def is_listed(self) -> bool:
        """Visible in the public catalog."""
        return self.status == ModelStatus.APPROVED and self.is_public


REVIEW_FIELDS = frozenset({"update_status", "pending_changes", "rejection_reason"})


class Model(PublicModel):
    """A model record as stored in the models table."""

    update_status: UpdateStatus = UpdateStatus.IDLE
    pending_changes: ModelPatch | None = None
    rejection_reason: str | None = None

    @model_validator(mode="after")
    def _check_review_state(self) -> "Model":
        pending = self.update_status == UpdateStatus.PENDING_REVIEW
        if pending != (self.pending_changes is not None):
            raise ValueError(
                "update_status is pending_review if and only if pending_changes is set"
            )
        return self


class ModelView(PublicModel):
    """
    A model as returned to one viewer.

    The review fields are filled for the owner and admins and null for
    everyone else.
    """

    update_status: UpdateStatus | None = None
    pending_changes: ModelPatch | None = None
    rejection_reason: str | None = None

    @classmethod
    def of(cls, model: Model, show_review: bool) -> "ModelView":
        exclude = None if show_review else set(REVIEW_FIELDS)
        return cls.model_validate(model.model_dump(exclude=exclude))

# =============================================================================
# API Schemas
# =============================================================================

class ModelCreate(BaseModel):
    """
    Request body for creating a model.

    file_path / image_url are storage paths returned by the upload endpoints.
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    file_path: str = Field(..., min_length=1, max_length=500)
    file_size: int = Field(default=0, ge=0)
    image_url: str | None = None
    tags: TagList = Field(default_factory=list)
    is_public: bool = True


class ModelDetail(BaseModel):
    model: ModelView
    favorite_count: int = 0
    is_favorited: bool | None = None


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


class DownloadInfo(BaseModel):
    """
    Result of a download request.

    file_path, file_name and url are null when the caller may not see the
    model; the download is counted either way.
    """
    model_config = ConfigDict(protected_namespaces=())

    model_id: UUID
    downloads: int = 0
    file_path: str | None = None
    file_name: str | None = None
    url: str | None = None
