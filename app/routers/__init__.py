# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: Own account, profile edits, public profiles
# - models.py: Catalog browse/create/edit/delete/download/favorite
# - favorites.py: The caller's favorites
# - announcements.py: Announcement reads
# - upload.py: Model file and image uploads
# - admin.py: Moderation queues and decisions, user administration
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import models
from . import favorites
from . import announcements
from . import upload
from . import admin

__all__ = [
    "health",
    "users",
    "models",
    "favorites",
    "announcements",
    "upload",
    "admin",
]
