# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client singleton
# - security.py: Password hashing and JWT token issuance
# - mailer.py: Email templates and SMTP delivery (used by workers)
# - utils.py: Shared utilities (error handling, UUID normalization, paging)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, normalize_uuid, page_bounds, total_pages, utc_now

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "normalize_uuid",
    "page_bounds",
    "total_pages",
    "utc_now",
]
