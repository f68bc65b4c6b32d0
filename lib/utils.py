# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small helpers with no project dependencies:
# - normalize_uuid: ids as strings for PostgREST filters
# - utc_now: timezone-aware timestamps for records and tokens
# - page_bounds / total_pages: 1-indexed pagination arithmetic
# - ApplicationError: base for errors raised outside the HTTP layer
# =============================================================================

import math
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


def normalize_uuid(value: str | UUID) -> str:
    """
    Id in the string form PostgREST filters expect.

    Example:
        normalize_uuid(UUID("550e8400-e29b-41d4-a716-446655440000"))
        # "550e8400-e29b-41d4-a716-446655440000"
    """
    return value if isinstance(value, str) else str(value)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """
    Inclusive (start, end) row range for a 1-indexed page, as used by
    PostgREST's range().

    Example:
        page_bounds(2, 12)  # (12, 23)
    """
    start = (max(page, 1) - 1) * page_size
    return start, start + page_size - 1


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0


class ApplicationError(Exception):
    """
    Error raised below the HTTP layer (database client, mailer, tokens).

    Carries a machine-readable code next to the message; callers branch on
    the code (e.g. TOKEN_EXPIRED vs TOKEN_INVALID, UNKNOWN_TEMPLATE vs
    SMTP_SEND_FAILED) rather than on the message text.
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        if self.suggestion:
            return f"[{self.code}] {self.message} ({self.suggestion})"
        return f"[{self.code}] {self.message}"
