"""Tests for email rendering and SendGrid delivery."""

from unittest.mock import MagicMock, patch

from app.config import settings
from app.models import OutboxEmail
from app.services.email_service import EmailService


class TestSendEmail:
    """Tests for SendGrid delivery."""

    def test_skips_without_api_key(self):
        with patch.object(settings, "sendgrid_api_key", ""):
            assert EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>") is False

    @patch("app.services.email_service.SendGridAPIClient")
    def test_sends_via_sendgrid(self, mock_client_cls):
        mock_client_cls.return_value.send.return_value = MagicMock(status_code=202)

        with patch.object(settings, "sendgrid_api_key", "SG.test"):
            assert EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>") is True

        mock_client_cls.assert_called_once_with("SG.test")
        mock_client_cls.return_value.send.assert_called_once()

    @patch("app.services.email_service.SendGridAPIClient")
    def test_provider_error_returns_false(self, mock_client_cls):
        mock_client_cls.return_value.send.side_effect = RuntimeError("503")

        with patch.object(settings, "sendgrid_api_key", "SG.test"):
            assert EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>") is False

    @patch("app.services.email_service.SendGridAPIClient")
    def test_unexpected_status_returns_false(self, mock_client_cls):
        mock_client_cls.return_value.send.return_value = MagicMock(status_code=400)

        with patch.object(settings, "sendgrid_api_key", "SG.test"):
            assert EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>") is False


class TestQueueing:
    """Tests for the queued email templates."""

    def test_verification_email_links_to_frontend(self, db):
        EmailService.queue_verification_email(db, "bob@example.com", "Bob", "tok123")
        db.commit()

        entry = db.query(OutboxEmail).one()
        assert entry.to_address == "bob@example.com"
        assert f"{settings.frontend_url}/verify-email/tok123" in entry.html_body
        assert "Bob" in entry.html_body

    def test_password_reset_email_links_to_frontend(self, db):
        EmailService.queue_password_reset_email(db, "bob@example.com", "tok456")
        db.commit()

        entry = db.query(OutboxEmail).one()
        assert f"{settings.frontend_url}/reset-password/tok456" in entry.html_body
        assert entry.subject == "Reset Your Password - Snapfeed"

    def test_queue_is_rolled_back_with_the_caller(self, db):
        EmailService.queue_welcome_email(db, "bob@example.com", "Bob")
        db.rollback()

        assert db.query(OutboxEmail).count() == 0
