# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Tasks:
# - send_email: Render a named template and deliver it over SMTP
#
# Enqueued by core.services.notification_service; the API never waits on
# the result.
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from app.config import get_settings
from lib.mailer import MailerError, render_email, send_email as deliver_email

logger = logging.getLogger(__name__)

# Errors that retrying cannot fix
_PERMANENT_ERRORS = {"UNKNOWN_TEMPLATE", "SMTP_NOT_CONFIGURED"}


@shared_task(bind=True, name="workers.tasks.send_email", max_retries=3, default_retry_delay=60)
def send_email(self, template: str, recipient: str, context: dict[str, Any]) -> dict[str, Any]:
    """
    Render and deliver one email.

    Args:
        template: Template name (welcome, reset_password, model_review, profile_review)
        recipient: Destination address
        context: Template placeholder values

    Returns:
        Dict with:
        - success: bool
        - template: Template name
        - error: Error message (if unsuccessful)
    """
    logger.info(f"Sending '{template}' email to {recipient}")

    try:
        subject, html = render_email(template, context)
        deliver_email(get_settings(), recipient, subject, html)
    except MailerError as e:
        if e.code in _PERMANENT_ERRORS:
            logger.error(f"Email '{template}' to {recipient} dropped: {e.message}")
            return {"success": False, "template": template, "error": e.message}
        logger.warning(f"Email '{template}' to {recipient} failed, retrying: {e.message}")
        raise self.retry(exc=e)

    return {"success": True, "template": template}
