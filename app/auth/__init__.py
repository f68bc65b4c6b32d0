# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication with locally issued tokens.
#
# Usage:
#   from app.auth import CurrentUser, AdminUser
#
#   @router.get("/protected")
#   async def protected(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    AdminUser,
    CurrentUser,
    OptionalUser,
    SuperAdminUser,
    get_current_user,
    get_current_user_optional,
    require_admin_user,
    require_super_admin_user,
)
from app.auth.models import AuthResponse, AuthUser

__all__ = [
    "AdminUser",
    "CurrentUser",
    "OptionalUser",
    "SuperAdminUser",
    "get_current_user",
    "get_current_user_optional",
    "require_admin_user",
    "require_super_admin_user",
    "AuthResponse",
    "AuthUser",
]
