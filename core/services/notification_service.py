# =============================================================================
# core/services/notification_service.py - Fire-and-forget Email
# =============================================================================
# Enqueues templated emails on the Celery worker (workers.tasks.send_email).
# Sending never fails the operation that triggered it: when SMTP is not
# configured the message is skipped, and enqueue errors are logged.
# =============================================================================

import logging
from typing import Any, Callable

from app.config import Settings
from core.models.model import Model
from core.models.user import User

logger = logging.getLogger(__name__)

Dispatcher = Callable[[str, str, dict[str, Any]], Any]


def _celery_dispatch(template: str, recipient: str, context: dict[str, Any]) -> None:
    from workers.tasks import send_email

    send_email.delay(template, recipient, context)


class NotificationService:
    """
    Sends emails keyed by template name and recipient.

    The dispatcher defaults to the Celery task; tests pass a recorder.
    """

    def __init__(self, settings: Settings, dispatcher: Dispatcher | None = None):
        self._settings = settings
        self._dispatch = dispatcher or _celery_dispatch

    def send(self, template: str, recipient: str, context: dict[str, Any]) -> bool:
        """
        Enqueue one email.

        Returns:
            True if the message was handed to the queue
        """
        if not self._settings.smtp_configured:
            logger.debug(f"SMTP not configured, skipping '{template}' email to {recipient}")
            return False

        try:
            self._dispatch(template, recipient, context)
        except Exception as e:
            logger.warning(f"Failed to enqueue '{template}' email to {recipient}: {e}")
            return False

        logger.info(f"Queued '{template}' email to {recipient}")
        return True

    def _link(self, path: str) -> str:
        return f"{self._settings.FRONTEND_URL.rstrip('/')}{path}"

    # -------------------------------------------------------------------------
    # Named notifications
    # -------------------------------------------------------------------------

    def welcome(self, user: User, verification_token: str) -> bool:
        return self.send("welcome", user.email, {
            "username": user.username,
            "verify_link": self._link(f"/verify-email?token={verification_token}"),
        })

    def email_change(self, user: User, new_email: str, change_token: str) -> bool:
        """Sent to the new address; the current one keeps working until confirmed."""
        return self.send("email_change", new_email, {
            "username": user.username,
            "new_email": new_email,
            "verify_link": self._link(f"/verify-email-change?token={change_token}"),
        })

    def password_reset(self, user: User, reset_token: str) -> bool:
        return self.send("reset_password", user.email, {
            "reset_link": self._link(f"/update-password?token={reset_token}"),
        })

    def model_reviewed(
        self,
        owner: User,
        model: Model,
        approved: bool,
        reason: str | None = None,
    ) -> bool:
        return self.send("model_review", owner.email, {
            "username": owner.username,
            "model_title": model.title,
            "status": "approved" if approved else "rejected",
            "reason": reason,
            "model_link": self._link(f"/models/{model.id}"),
        })

    def profile_reviewed(self, user: User, approved: bool) -> bool:
        return self.send("profile_review", user.email, {
            "username": user.username,
            "status": "approved" if approved else "rejected",
        })
