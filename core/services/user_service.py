# =============================================================================
# core/services/user_service.py - Accounts and Credentials
# =============================================================================
# Registration, login, token refresh, email verification, email change,
# password reset and change, profile reads and the pending-profile queue.
#
# The first account ever created becomes the super admin; every later
# registration is a plain user.
# =============================================================================

import logging
import secrets
from datetime import timedelta
from uuid import UUID

from app.config import Settings
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from core.models.common import Page
from core.models.user import ProfileStatus, PublicProfile, Role, User
from core.repositories import UserRepository
from core.services.notification_service import NotificationService
from lib.security import TokenIssuer, TokenPair, hash_password, verify_password
from lib.utils import utc_now

logger = logging.getLogger(__name__)


def _new_token() -> str:
    return secrets.token_urlsafe(32)


class UserService:
    """
    Service for account operations.

    Usage:
        users = UserService(user_repo, settings, TokenIssuer(settings), notifications)
        user, tokens = users.authenticate("a@example.com", "secret")
    """

    def __init__(
        self,
        users: UserRepository,
        settings: Settings,
        tokens: TokenIssuer,
        notifications: NotificationService,
    ):
        self._users = users
        self._settings = settings
        self._tokens = tokens
        self._notifications = notifications

    def _issue(self, user: User) -> TokenPair:
        return self._tokens.issue(user.id, user.email, user.role.value)

    def _ensure_not_banned(self, user: User) -> None:
        if user.is_banned:
            raise ForbiddenError(
                "Your account has been banned",
                suggestion=user.banned_reason,
            )

    # -------------------------------------------------------------------------
    # Registration & login
    # -------------------------------------------------------------------------

    def register(self, email: str, username: str, password: str) -> tuple[User, TokenPair]:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: Email or username already taken
        """
        if self._users.exists_by_email(email):
            raise ConflictError("email", email)
        if self._users.exists_by_username(username):
            raise ConflictError("username", username)

        role = Role.SUPER_ADMIN if self._users.count() == 0 else Role.USER
        verification_token = _new_token()

        user = self._users.create({
            "email": email,
            "username": username,
            "password_hash": hash_password(password),
            "role": role,
            "profile_status": ProfileStatus.APPROVED,
            "email_verified": False,
            "verification_token": verification_token,
        })
        logger.info(f"Registered user {user.id} ({role.value})")

        self._notifications.welcome(user, verification_token)
        return user, self._issue(user)

    def authenticate(self, email: str, password: str) -> tuple[User, TokenPair]:
        """
        Raises:
            UnauthorizedError: Unknown email or wrong password
            ForbiddenError: Account is banned
        """
        user = self._users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        self._ensure_not_banned(user)
        return user, self._issue(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair carrying the current role.

        Raises:
            TokenError: Token is invalid or expired
            UnauthorizedError: Account no longer exists
            ForbiddenError: Account is banned
        """
        user_id = self._tokens.decode_refresh(refresh_token)
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UnauthorizedError("Account no longer exists")
        self._ensure_not_banned(user)
        return self._issue(user)

    def ensure_bootstrap_admin(self) -> User | None:
        """
        Create the configured super admin account if the users table is empty.

        Returns:
            The created user, or None if nothing was done
        """
        email = self._settings.BOOTSTRAP_ADMIN_EMAIL
        password = self._settings.BOOTSTRAP_ADMIN_PASSWORD
        if not email or not password:
            return None
        if self._users.count() > 0:
            return None

        user = self._users.create({
            "email": email,
            "username": self._settings.BOOTSTRAP_ADMIN_USERNAME,
            "password_hash": hash_password(password),
            "role": Role.SUPER_ADMIN,
            "profile_status": ProfileStatus.APPROVED,
            "email_verified": True,
        })
        logger.info(f"Created bootstrap super admin {user.id}")
        return user

    # -------------------------------------------------------------------------
    # Email verification & passwords
    # -------------------------------------------------------------------------

    def verify_email(self, token: str) -> User:
        user = self._users.find_by_verification_token(token)
        if user is None:
            raise InvalidInputError("Invalid verification token", code="INVALID_TOKEN")
        return self._users.update(user.id, {"email_verified": True, "verification_token": None})

    def request_password_reset(self, email: str) -> None:
        """
        Issue a reset token and email a link.

        Unknown and banned accounts are ignored without error so callers
        cannot learn which emails are registered.
        """
        user = self._users.find_by_email(email)
        if user is None or user.is_banned:
            logger.info("Password reset requested for unknown or banned account")
            return

        token = _new_token()
        expires = utc_now() + timedelta(minutes=self._settings.RESET_TOKEN_TTL_MINUTES)
        self._users.update(user.id, {"reset_token": token, "reset_token_expires": expires})
        self._notifications.password_reset(user, token)

    def reset_password(self, token: str, new_password: str) -> None:
        """
        Raises:
            InvalidInputError: Unknown or expired token
        """
        user = self._users.find_by_reset_token(token)
        if user is None:
            raise InvalidInputError("Invalid reset token", code="INVALID_TOKEN")
        if user.reset_token_expires is None or user.reset_token_expires < utc_now():
            raise InvalidInputError("Reset token has expired", code="TOKEN_EXPIRED")

        self._users.update(user.id, {
            "password_hash": hash_password(new_password),
            "reset_token": None,
            "reset_token_expires": None,
        })
        logger.info(f"Password reset for user {user.id}")

    def change_password(self, user_id: UUID | str, old_password: str, new_password: str) -> None:
        user = self.get(user_id)
        if not verify_password(old_password, user.password_hash):
            raise InvalidInputError("Incorrect old password", code="INCORRECT_PASSWORD")
        self._users.update(user.id, {"password_hash": hash_password(new_password)})

    def request_email_change(self, user_id: UUID | str, new_email: str) -> None:
        """
        Park new_email on the account and send a confirmation link to it.

        The current address stays in effect until the link is followed.
        A second request replaces the first.

        Raises:
            NotFoundError: Unknown user
            ConflictError: new_email already belongs to an account
        """
        user = self.get(user_id)
        if self._users.exists_by_email(new_email):
            raise ConflictError("email", new_email)

        token = _new_token()
        self._users.update(user.id, {"new_email": new_email, "email_change_token": token})
        logger.info(f"Email change requested for user {user.id}")
        self._notifications.email_change(user, new_email, token)

    def verify_email_change(self, token: str) -> User:
        """
        Swap in the pending address and mark it verified.

        Raises:
            InvalidInputError: Unknown token or no pending address
            ConflictError: The address was registered since the request
        """
        user = self._users.find_by_email_change_token(token)
        if user is None:
            raise InvalidInputError("Invalid email change token", code="INVALID_TOKEN")
        if not user.new_email:
            raise InvalidInputError("No email change pending", code="NO_PENDING_EMAIL")
        if self._users.exists_by_email(user.new_email):
            raise ConflictError("email", user.new_email)

        updated = self._users.update(user.id, {
            "email": user.new_email,
            "new_email": None,
            "email_change_token": None,
            "email_verified": True,
        })
        logger.info(f"Email changed for user {user.id}")
        return updated

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, user_id: UUID | str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def get_public_profile(self, user_id: UUID | str) -> PublicProfile:
        return PublicProfile.from_user(self.get(user_id))

    def list_pending_profiles(self, page: int = 1, page_size: int | None = None) -> Page[User]:
        page_size = self._settings.clamp_page_size(page_size)
        items, total = self._users.list_pending_profiles(page, page_size)
        return Page.build(items, total, page, page_size)

