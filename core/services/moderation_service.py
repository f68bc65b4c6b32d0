# =============================================================================
# core/services/moderation_service.py - Review Workflow
# =============================================================================
# Decides, for every mutating request against a model or a user profile,
# whether the change applies immediately or is staged for review, and
# resolves staged changes when an admin decides.
#
#   Model.status         pending --approve--> approved
#                        pending --reject(reason)--> rejected
#   Model.update_status  idle --propose (non-admin)--> pending_review
#                        pending_review --approve--> idle (diff materialized)
#                        pending_review --reject(reason)--> idle (diff discarded)
#   User.profile_status  approved --propose (non-admin)--> pending_review
#                        pending_review --approve--> approved (diff materialized)
#                        pending_review --reject--> approved (diff discarded)
#
# Every transition is a single row update, so a diff is applied whole or
# not at all. Concurrent proposals are last-write-wins.
# =============================================================================

import logging
from uuid import UUID

from app.exceptions import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from core.access import Actor, ensure_owner_or_admin, is_admin
from core.models.model import Model, ModelPatch, ModelStatus, UpdateStatus
from core.models.patch import apply_patch
from core.models.user import ProfilePatch, ProfileStatus, User
from core.repositories import ModelRepository, UserRepository
from core.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def _require_reason(reason: str | None) -> str:
    if reason is None or not reason.strip():
        raise InvalidInputError(
            "A rejection reason is required",
            code="REASON_REQUIRED",
            suggestion="Tell the owner why the model was rejected",
        )
    return reason.strip()


class ModerationService:
    """
    Model publication, model edit review and profile edit review.

    Usage:
        moderation = ModerationService(model_repo, user_repo, notifications)
        model = moderation.propose_model_edit(model_id, requester, ModelPatch(title="New"))
        model = moderation.decide_model_edit_review(model_id, approve=True)
    """

    def __init__(
        self,
        models: ModelRepository,
        users: UserRepository,
        notifications: NotificationService,
    ):
        self._models = models
        self._users = users
        self._notifications = notifications

    # -------------------------------------------------------------------------
    # Loading / writing
    # -------------------------------------------------------------------------

    def _load_model(self, model_id: UUID | str) -> Model:
        model = self._models.find_by_id(model_id)
        if model is None:
            raise NotFoundError("model", model_id)
        return model

    def _load_user(self, user_id: UUID | str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def _write_model(self, model_id: UUID | str, changes: dict) -> Model:
        updated = self._models.update(model_id, changes)
        if updated is None:
            raise NotFoundError("model", model_id)
        return updated

    def _write_user(self, user_id: UUID | str, changes: dict) -> User:
        updated = self._users.update(user_id, changes)
        if updated is None:
            raise NotFoundError("user", user_id)
        return updated

    # -------------------------------------------------------------------------
    # Model edits
    # -------------------------------------------------------------------------

    def propose_model_edit(self, model_id: UUID | str, requester: Actor, patch: ModelPatch) -> Model:
        """
        Apply or stage an edit to a model.

        An admin's edit is written to the live record at once and leaves the
        edit state alone. The owner's edit replaces any previously staged
        diff (no merge) and puts the model in pending_review.

        Raises:
            NotFoundError: Model does not exist
            UnauthorizedError: Requester is neither the owner nor an admin
        """
        model = self._load_model(model_id)
        ensure_owner_or_admin(requester, model.user_id, "model")

        if is_admin(requester):
            changes = apply_patch(patch)
            if not changes:
                return model
            updated = self._write_model(model.id, changes)
            logger.info(f"Admin {requester.id} edited model {model.id}: {sorted(changes)}")
            return updated

        updated = self._write_model(model.id, {
            "pending_changes": patch,
            "update_status": UpdateStatus.PENDING_REVIEW,
        })
        logger.info(f"Staged edit for model {model.id} by owner {requester.id}")
        return updated

    def decide_model_publication(
        self,
        model_id: UUID | str,
        approve: bool,
        reason: str | None = None,
    ) -> Model:
        """
        Approve or reject a model.

        While an edit is pending review, the decision resolves that edit
        instead of the publication state (see decide_model_edit_review).
        Otherwise approve publishes the model and reject records the reason;
        an already decided model may be decided again.

        Raises:
            NotFoundError: Model does not exist
            InvalidInputError: Rejection without a reason
        """
        model = self._load_model(model_id)

        if model.update_status == UpdateStatus.PENDING_REVIEW:
            return self._resolve_edit(model, approve, reason)

        if approve:
            changes = {"status": ModelStatus.APPROVED, "rejection_reason": None}
        else:
            changes = {"status": ModelStatus.REJECTED, "rejection_reason": _require_reason(reason)}

        updated = self._write_model(model.id, changes)
        logger.info(f"Model {model.id} publication: {model.status.value} -> {updated.status.value}")
        self._notify_owner(updated, approve, changes.get("rejection_reason"))
        return updated

    def decide_model_edit_review(
        self,
        model_id: UUID | str,
        approve: bool,
        reason: str | None = None,
    ) -> Model:
        """
        Resolve a staged model edit.

        Approve writes exactly the present fields of the diff to the live
        record; reject discards the diff and records the reason. Either way
        the model returns to idle. Publication state is not touched.

        Raises:
            NotFoundError: Model does not exist
            InvalidStateError: No edit is pending review
            InvalidInputError: Rejection without a reason
        """
        model = self._load_model(model_id)
        if model.update_status != UpdateStatus.PENDING_REVIEW:
            raise InvalidStateError(
                f"Model {model.id} has no edit pending review",
                details={"update_status": model.update_status.value},
            )
        return self._resolve_edit(model, approve, reason)

    def _resolve_edit(self, model: Model, approve: bool, reason: str | None) -> Model:
        if approve:
            changes = apply_patch(
                model.pending_changes,
                pending_changes=None,
                update_status=UpdateStatus.IDLE,
            )
        else:
            changes = apply_patch(
                None,
                pending_changes=None,
                update_status=UpdateStatus.IDLE,
                rejection_reason=_require_reason(reason),
            )

        updated = self._write_model(model.id, changes)
        logger.info(f"Model {model.id} edit review: {'approved' if approve else 'rejected'}")
        self._notify_owner(updated, approve, changes.get("rejection_reason"))
        return updated

    def _notify_owner(self, model: Model, approved: bool, reason: str | None) -> None:
        try:
            owner = self._users.find_by_id(model.user_id)
        except Exception as e:
            logger.warning(f"Could not load owner of model {model.id} for notification: {e}")
            return
        if owner is not None:
            self._notifications.model_reviewed(owner, model, approved, reason)

    # -------------------------------------------------------------------------
    # Profile edits
    # -------------------------------------------------------------------------

    def propose_profile_edit(self, user_id: UUID | str, requester: Actor, patch: ProfilePatch) -> User:
        """
        Apply or stage an edit to a user's profile.

        Same staging rule as model edits. A new username must not exactly
        match another user's; this is only checked here, not on approval.

        Raises:
            NotFoundError: User does not exist
            UnauthorizedError: Requester is neither the user nor an admin
            ConflictError: Username already taken
        """
        user = self._load_user(user_id)
        ensure_owner_or_admin(requester, user.id, "profile")

        if patch.username is not None and patch.username != user.username:
            if self._users.exists_by_username(patch.username, exclude_id=user.id):
                raise ConflictError("username", patch.username)

        if is_admin(requester):
            changes = apply_patch(patch)
            if not changes:
                return user
            updated = self._write_user(user.id, changes)
            logger.info(f"Admin {requester.id} edited profile of {user.id}: {sorted(changes)}")
            return updated

        updated = self._write_user(user.id, {
            "pending_changes": patch,
            "profile_status": ProfileStatus.PENDING_REVIEW,
        })
        logger.info(f"Staged profile edit for user {user.id}")
        return updated

    def decide_profile_review(self, user_id: UUID | str, approve: bool) -> User:
        """
        Resolve a staged profile edit.

        Unlike a model rejection, rejecting a profile edit is not terminal:
        the diff is discarded and the profile goes back to approved.

        Raises:
            NotFoundError: User does not exist
            InvalidStateError: No profile edit is pending review
        """
        user = self._load_user(user_id)
        if user.profile_status != ProfileStatus.PENDING_REVIEW:
            raise InvalidStateError(
                f"User {user.id} has no profile edit pending review",
                details={"profile_status": user.profile_status.value},
            )

        pending = user.pending_changes if approve else None
        changes = apply_patch(
            pending,
            pending_changes=None,
            profile_status=ProfileStatus.APPROVED,
        )
        updated = self._write_user(user.id, changes)
        logger.info(f"Profile review for user {user.id}: {'approved' if approve else 'rejected'}")
        self._notifications.profile_reviewed(updated, approve)
        return updated
