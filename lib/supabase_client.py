# =============================================================================
# lib/supabase_client.py - Shared Supabase Client
# =============================================================================
# One client per process, created lazily from the injected Settings and
# shared by the repositories (tables, RPCs) and StorageService (buckets).
#
# The service key bypasses row level security; authorization happens in
# core.access before any query is issued.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from app.config import Settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """
    A table, RPC or client-setup call against Supabase failed.

    The API turns it into a bare INTERNAL_ERROR; the message and details
    only reach the logs.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class SupabaseClient:
    """Lazily created, process-wide client."""

    _instance: Client | None = None

    @classmethod
    def get_client(cls, settings: Settings) -> Client:
        """
        Return the shared client, creating it on first use.

        Raises:
            SupabaseClientError: CLIENT_INIT_FAILED if the URL or key is rejected
        """
        if cls._instance is not None:
            return cls._instance

        try:
            cls._instance = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Could not connect to {settings.SUPABASE_URL}: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY",
            )

        logger.info(f"Supabase client ready for {settings.SUPABASE_URL}")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the shared client so the next call builds a new one."""
        cls._instance = None
