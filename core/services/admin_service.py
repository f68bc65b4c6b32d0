# =============================================================================
# core/services/admin_service.py - User Administration
# =============================================================================
# Role grants and revocations, bans, user deletion and dashboard stats.
#
# Every mutation here is a direct field write on the users table, gated by
# core.access; role changes only take effect on the target's next token.
# =============================================================================

import logging
from uuid import UUID

from app.config import Settings
from app.exceptions import NotFoundError
from core.access import Actor, ensure_can_change_role, ensure_can_moderate_user, require_admin
from core.models.common import AdminStats, CleanupReport, DeletionResult, Page
from core.models.model import ModelStatus
from core.models.user import Role, User
from core.repositories import ModelRepository, UserRepository
from core.services.storage_service import StorageKind, StorageService
from lib.utils import utc_now

logger = logging.getLogger(__name__)


class AdminService:
    """Admin-gated operations on user accounts."""

    def __init__(
        self,
        users: UserRepository,
        models: ModelRepository,
        storage: StorageService,
        settings: Settings,
    ):
        self._users = users
        self._models = models
        self._storage = storage
        self._settings = settings

    def _load(self, user_id: UUID | str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def _write(self, user_id: UUID | str, changes: dict) -> User:
        updated = self._users.update(user_id, changes)
        if updated is None:
            raise NotFoundError("user", user_id)
        return updated

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_users(
        self,
        actor: Actor,
        page: int = 1,
        page_size: int | None = None,
        role: Role | None = None,
    ) -> Page[User]:
        require_admin(actor)
        page_size = self._settings.clamp_page_size(page_size)
        if role is None:
            items, total = self._users.list_users(page, page_size)
        else:
            items, total = self._users.list_by_role(role, page, page_size)
        return Page.build(items, total, page, page_size)

    def get_super_admin(self) -> User:
        items, _ = self._users.list_by_role(Role.SUPER_ADMIN, 1, 1)
        if not items:
            raise NotFoundError("user", Role.SUPER_ADMIN.value)
        return items[0]

    def stats(self, actor: Actor) -> AdminStats:
        require_admin(actor)
        return AdminStats(
            total_users=self._users.count(),
            total_models=self._models.count(),
            pending_models=self._models.count_by_status(ModelStatus.PENDING),
            pending_updates=self._models.count_pending_updates(),
            pending_profiles=self._users.count_pending_profiles(),
            total_downloads=self._models.sum_downloads(),
        )

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def change_role(self, actor: Actor, user_id: UUID | str, role: Role) -> User:
        """
        Set a user's role to user or admin.

        Raises:
            NotFoundError: User does not exist
            UnauthorizedError: Caller is not the super admin
            ForbiddenError: Target is the super admin, the new role is
                super_admin, or the caller targets themselves
        """
        target = self._load(user_id)
        ensure_can_change_role(actor, target, role)

        if target.role == role:
            return target

        updated = self._write(target.id, {"role": role})
        logger.info(f"Role of {target.id} changed {target.role.value} -> {role.value} by {actor.id}")
        return updated

    def grant_admin(self, actor: Actor, user_id: UUID | str) -> User:
        return self.change_role(actor, user_id, Role.ADMIN)

    def revoke_admin(self, actor: Actor, user_id: UUID | str) -> User:
        return self.change_role(actor, user_id, Role.USER)

    # -------------------------------------------------------------------------
    # Bans
    # -------------------------------------------------------------------------

    def ban(self, actor: Actor, user_id: UUID | str, reason: str) -> User:
        """
        Raises:
            NotFoundError: User does not exist
            ForbiddenError: Target is the super admin, or an admin banned by
                a non-super admin
            UnauthorizedError: Caller is not an admin
        """
        target = self._load(user_id)
        ensure_can_moderate_user(actor, target)

        updated = self._write(target.id, {
            "is_banned": True,
            "banned_reason": reason,
            "banned_at": utc_now(),
        })
        logger.info(f"User {target.id} banned by {actor.id}: {reason}")
        return updated

    def unban(self, actor: Actor, user_id: UUID | str) -> User:
        target = self._load(user_id)
        ensure_can_moderate_user(actor, target)

        updated = self._write(target.id, {
            "is_banned": False,
            "banned_reason": None,
            "banned_at": None,
        })
        logger.info(f"User {target.id} unbanned by {actor.id}")
        return updated

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete_user(self, actor: Actor, user_id: UUID | str) -> DeletionResult:
        """
        Delete a user, their models (by cascade) and, best-effort, their files.

        The model list is read before the record is deleted; files are
        removed afterwards and failures only show up in the cleanup report.
        """
        target = self._load(user_id)
        ensure_can_moderate_user(actor, target)

        models = self._models.list_all_by_owner(target.id)

        if not self._users.delete(target.id):
            raise NotFoundError("user", user_id)
        logger.info(f"User {target.id} deleted by {actor.id} ({len(models)} models)")

        cleanup = CleanupReport()
        for model in models:
            cleanup = cleanup.merge(self._storage.remove_model_files(model))
        cleanup = cleanup.merge(self._storage.remove_paths(StorageKind.IMAGE, [target.avatar_url]))

        if not cleanup.ok:
            logger.warning(f"User {target.id} deleted but file cleanup failed: {cleanup.failed}")
        return DeletionResult(deleted_id=target.id, cleanup=cleanup)
