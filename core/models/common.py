# =============================================================================
# core/models/common.py - Shared Result Schemas
# =============================================================================
# - Page: one page of a paginated listing
# - CleanupReport / DeletionResult: outcome of a record deletion whose
#   best-effort file cleanup may have partially failed
# =============================================================================

from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

from lib.utils import total_pages

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """
    One page of results plus the total count for the whole query.

    Example:
        {
            "items": [...],
            "total": 42,
            "page": 1,
            "page_size": 12,
            "total_pages": 4
        }
    """

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=12, ge=1)
    total_pages: int = Field(default=0, ge=0)

    @classmethod
    def build(cls, items: list[T], total: int, page: int, page_size: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total, page_size),
        )


class CleanupReport(BaseModel):
    """Which storage paths a best-effort cleanup tried to remove, and which failed."""
    attempted: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "CleanupReport") -> "CleanupReport":
        return CleanupReport(
            attempted=self.attempted + other.attempted,
            failed=self.failed + other.failed,
        )


class DeletionResult(BaseModel):
    """
    The record deletion always succeeded when this is returned; cleanup
    failures are reported here instead of failing the operation.
    """
    deleted_id: UUID
    cleanup: CleanupReport = Field(default_factory=CleanupReport)


class AdminStats(BaseModel):
    total_users: int = 0
    total_models: int = 0
    pending_models: int = 0
    pending_updates: int = 0
    pending_profiles: int = 0
    total_downloads: int = 0


class MessageResponse(BaseModel):
    message: str
