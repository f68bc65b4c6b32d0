# =============================================================================
# core/models/user.py - Identity & Role Model
# =============================================================================
# Users, their role tier, ban status and the profile review state.
#
# Roles form a total order: user < admin < super_admin. Exactly one
# super_admin exists; it is created by the first registration (or the
# bootstrap account) and no role-mutation path can add or remove it.
#
# Profile review state:
#   approved --propose (non-admin)--> pending_review
#   pending_review --approve--> approved (diff materialized)
#   pending_review --reject-->  approved (diff discarded)
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from .patch import Patch


class Role(str, Enum):
    """Role tier of a user."""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {Role.USER: 0, Role.ADMIN: 1, Role.SUPER_ADMIN: 2}


class ProfileStatus(str, Enum):
    APPROVED = "approved"
    PENDING_REVIEW = "pending_review"


class ProfilePatch(Patch):
    """Proposed profile changes awaiting review."""
    username: str | None = Field(default=None, min_length=2, max_length=50)
    bio: str | None = Field(default=None, max_length=2000)
    avatar_url: str | None = None


class User(BaseModel):
    """
    A user record as stored in the users table.

    Internal only: API responses go through UserResponse / PublicProfile so
    credential and token columns never leave the service layer.
    """

    id: UUID
    email: str
    username: str
    password_hash: str
    role: Role = Role.USER
    bio: str | None = None
    avatar_url: str | None = None

    profile_status: ProfileStatus = ProfileStatus.APPROVED
    pending_changes: ProfilePatch | None = None

    email_verified: bool = False
    verification_token: str | None = None
    reset_token: str | None = None
    reset_token_expires: datetime | None = None
    new_email: str | None = None
    email_change_token: str | None = None

    is_banned: bool = False
    banned_at: datetime | None = None
    banned_reason: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _check_review_state(self) -> "User":
        pending = self.profile_status == ProfileStatus.PENDING_REVIEW
        if pending != (self.pending_changes is not None):
            raise ValueError(
                "profile_status is pending_review if and only if pending_changes is set"
            )
        return self

    @property
    def is_admin(self) -> bool:
        return self.role.at_least(Role.ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN


# =============================================================================
# API Schemas
# =============================================================================

class UserResponse(BaseModel):
    """The caller's own view of their account (or an admin's view of any user)."""
    id: UUID
    email: str
    username: str
    role: Role
    bio: str | None = None
    avatar_url: str | None = None
    profile_status: ProfileStatus
    pending_changes: ProfilePatch | None = None
    email_verified: bool = False
    is_banned: bool = False
    banned_at: datetime | None = None
    banned_reason: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={
            "password_hash", "verification_token", "reset_token",
            "reset_token_expires", "new_email", "email_change_token", "updated_at",
        }))


class PublicProfile(BaseModel):
    """What anyone may see about a user: no email, no pending changes."""
    id: UUID
    username: str
    role: Role
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "PublicProfile":
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
        )


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=2, max_length=50)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6, max_length=72)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=6, max_length=72)


class ChangeEmailRequest(BaseModel):
    new_email: EmailStr


class RoleUpdateRequest(BaseModel):
    role: Role


class BanRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)
