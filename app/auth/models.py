# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from core.models.user import Role, UserResponse


class AuthUser(BaseModel):
    """
    Authenticated user extracted from an access token.

    This is the minimal user info available from the token itself,
    without querying the database. The role is the one in force when the
    token was issued.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None
    role: Role = Role.USER


class AuthResponse(BaseModel):
    """Token pair plus the signed-in account, returned by register and login."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
