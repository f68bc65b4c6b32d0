# =============================================================================
# tests/test_notifications.py - Email Notification Tests
# =============================================================================
# NotificationService (enqueue side), lib.mailer (rendering and SMTP) and
# the Celery send_email task. SMTP and the broker are mocked.
#
# Run with: pytest tests/test_notifications.py -v
# =============================================================================

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from core.services import NotificationService
from lib.mailer import MailerError, render_email, send_email
from workers.config import EMAIL_QUEUE, build_celery_config
from workers.tasks import send_email as send_email_task


class TestNotificationService:
    def test_skipped_without_smtp(self, settings):
        dispatcher = MagicMock()
        unconfigured = settings.model_copy(update={"SMTP_HOST": "", "SMTP_USER": ""})

        sent = NotificationService(unconfigured, dispatcher).send("welcome", "a@example.com", {})

        assert sent is False
        dispatcher.assert_not_called()

    def test_enqueue_failure_is_swallowed(self, settings):
        dispatcher = MagicMock(side_effect=ConnectionError("broker down"))

        sent = NotificationService(settings, dispatcher).send("welcome", "a@example.com", {})

        assert sent is False

    def test_profile_reviewed(self, notifications, outbox, owner):
        assert notifications.profile_reviewed(owner, approved=False)

        assert outbox == [("profile_review", owner.email, {"username": "alice", "status": "rejected"})]

    def test_email_change_goes_to_new_address(self, notifications, outbox, owner):
        assert notifications.email_change(owner, "alice@new.example.com", "tok")

        template, recipient, context = outbox[-1]
        assert template == "email_change"
        assert recipient == "alice@new.example.com"
        assert context["verify_link"] == "https://modelhub.test/verify-email-change?token=tok"


class TestMailer:
    def test_render_fills_placeholders(self):
        subject, html = render_email("welcome", {
            "username": "alice",
            "verify_link": "https://modelhub.test/verify-email?token=abc",
        })

        assert "Welcome" in subject
        assert "Hello, alice!" in html
        assert "https://modelhub.test/verify-email?token=abc" in html

    def test_missing_placeholders_render_blank(self):
        _, html = render_email("model_review", {"username": "alice", "reason": None})

        assert "$model_title" not in html
        assert "None" not in html

    def test_values_are_html_escaped(self):
        _, html = render_email("model_review", {
            "username": "<script>alert(1)</script>",
            "model_title": "<a href='http://evil.example'>x</a>",
        })

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "href='http://evil.example'" not in html
        assert "&lt;a href=&#x27;http://evil.example&#x27;&gt;x&lt;/a&gt;" in html

    def test_quotes_cannot_break_out_of_links(self):
        _, html = render_email("email_change", {
            "username": "alice",
            "new_email": "alice@new.example.com",
            "verify_link": 'https://modelhub.test/x" onclick="steal()',
        })

        assert 'onclick="steal()"' not in html
        assert "alice@new.example.com" in html

    def test_unknown_template(self):
        with pytest.raises(MailerError) as exc_info:
            render_email("nope", {})

        assert exc_info.value.code == "UNKNOWN_TEMPLATE"

    def test_send_requires_smtp(self, settings):
        unconfigured = settings.model_copy(update={"SMTP_HOST": ""})

        with pytest.raises(MailerError) as exc_info:
            send_email(unconfigured, "a@example.com", "Hi", "<p>Hi</p>")

        assert exc_info.value.code == "SMTP_NOT_CONFIGURED"

    def test_send_over_smtp(self, settings):
        with patch("lib.mailer.smtplib.SMTP") as smtp_class:
            smtp = smtp_class.return_value.__enter__.return_value
            smtp.has_extn.return_value = True

            send_email(settings, "a@example.com", "Hi", "<p>Hi</p>")

        smtp_class.assert_called_once_with("smtp.example.com", 587, timeout=30)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("mailer@example.com", "")
        message = smtp.send_message.call_args.args[0]
        assert message["To"] == "a@example.com"
        assert message["Subject"] == "Hi"

    def test_smtp_failure(self, settings):
        with patch("lib.mailer.smtplib.SMTP") as smtp_class:
            smtp_class.side_effect = smtplib.SMTPConnectError(421, "busy")

            with pytest.raises(MailerError) as exc_info:
                send_email(settings, "a@example.com", "Hi", "<p>Hi</p>")

        assert exc_info.value.code == "SMTP_SEND_FAILED"


class TestSendEmailTask:
    def test_success(self, settings):
        with patch("workers.tasks.get_settings", return_value=settings), \
             patch("workers.tasks.deliver_email") as deliver:
            result = send_email_task.run("profile_review", "a@example.com", {"username": "alice"})

        assert result == {"success": True, "template": "profile_review"}
        deliver.assert_called_once()
        assert deliver.call_args.args[1] == "a@example.com"

    def test_unknown_template_is_not_retried(self, settings):
        with patch("workers.tasks.get_settings", return_value=settings), \
             patch("workers.tasks.deliver_email") as deliver:
            result = send_email_task.run("nope", "a@example.com", {})

        assert result["success"] is False
        deliver.assert_not_called()

    def test_delivery_failure_raises_for_retry(self, settings):
        failure = MailerError("timeout", code="SMTP_SEND_FAILED")

        with patch("workers.tasks.get_settings", return_value=settings), \
             patch("workers.tasks.deliver_email", side_effect=failure):
            with pytest.raises(MailerError):
                send_email_task.run("welcome", "a@example.com", {})


class TestCeleryConfig:
    def test_email_task_is_routed_to_email_queue(self, settings):
        config = build_celery_config(settings)

        assert config["task_routes"]["workers.tasks.send_email"] == {"queue": EMAIL_QUEUE}
        assert config["broker_url"] == settings.REDIS_URL
