# =============================================================================
# lib/mailer.py - Email Templates and SMTP Delivery
# =============================================================================
# Renders the named email templates and delivers them over SMTP.
# Only the Celery worker calls send_email(); API code enqueues through
# core.services.notification_service instead.
#
# Templates:
# - welcome:         username, verify_link
# - reset_password:  reset_link
# - model_review:    username, model_title, status, reason, model_link
# - profile_review:  username, status
# - email_change:    username, new_email, verify_link
#
# Every context value is HTML-escaped before substitution.
# =============================================================================

import html
import logging
import smtplib
from email.message import EmailMessage
from string import Template
from typing import Any

from app.config import Settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class MailerError(ApplicationError):
    """Raised when an email cannot be rendered or delivered."""

    def __init__(self, message: str, code: str = "MAILER_ERROR"):
        super().__init__(message, code=code)


TEMPLATES: dict[str, tuple[str, str]] = {
    "welcome": (
        "Welcome to ModelHub",
        "<html><body>"
        "<h2>Welcome to ModelHub</h2>"
        "<p>Hello, $username!</p>"
        "<p>Please verify your email address:</p>"
        '<p><a href="$verify_link">$verify_link</a></p>'
        "</body></html>",
    ),
    "reset_password": (
        "Reset your password - ModelHub",
        "<html><body>"
        "<h2>Reset your password</h2>"
        "<p>Follow this link to choose a new password:</p>"
        '<p><a href="$reset_link">$reset_link</a></p>'
        "<p>The link expires in one hour.</p>"
        "</body></html>",
    ),
    "model_review": (
        "Your model was reviewed - ModelHub",
        "<html><body>"
        "<h2>Model review result</h2>"
        "<p>Hello, $username!</p>"
        "<p>Your model <strong>$model_title</strong> was $status.</p>"
        "<p>$reason</p>"
        '<p><a href="$model_link">$model_link</a></p>'
        "</body></html>",
    ),
    "profile_review": (
        "Your profile changes were reviewed - ModelHub",
        "<html><body>"
        "<h2>Profile review result</h2>"
        "<p>Hello, $username!</p>"
        "<p>Your profile changes were $status.</p>"
        "</body></html>",
    ),
    "email_change": (
        "Confirm your new email address - ModelHub",
        "<html><body>"
        "<h2>Confirm your new email address</h2>"
        "<p>Hello, $username!</p>"
        "<p>Follow this link to use <strong>$new_email</strong> for your account:</p>"
        '<p><a href="$verify_link">$verify_link</a></p>'
        "</body></html>",
    ),
}


class _BlankDefault(dict):
    def __missing__(self, key: str) -> str:
        return ""


def render_email(template: str, context: dict[str, Any]) -> tuple[str, str]:
    """
    Render a named template.

    Values are HTML-escaped (quotes included, so links stay inside their
    href attribute). Missing placeholders render as empty strings rather
    than failing.

    Returns:
        Tuple of (subject, html_body)

    Raises:
        MailerError: If the template name is unknown
    """
    if template not in TEMPLATES:
        raise MailerError(f"Unknown email template: {template}", code="UNKNOWN_TEMPLATE")

    subject, body = TEMPLATES[template]
    values = _BlankDefault(
        (key, "" if value is None else html.escape(str(value), quote=True))
        for key, value in context.items()
    )
    return subject, Template(body).substitute(values)


def send_email(settings: Settings, to: str, subject: str, html: str) -> None:
    """
    Deliver one HTML email over SMTP with STARTTLS when offered.

    Raises:
        MailerError: If SMTP is not configured or delivery fails
    """
    if not settings.smtp_configured:
        raise MailerError("SMTP not configured", code="SMTP_NOT_CONFIGURED")

    message = EmailMessage()
    message["From"] = settings.SMTP_FROM or settings.SMTP_USER
    message["To"] = to
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise MailerError(f"Failed to send email to {to}: {e}", code="SMTP_SEND_FAILED")

    logger.info(f"Sent email '{subject}' to {to}")
