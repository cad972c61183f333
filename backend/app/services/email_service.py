"""Email service using SendGrid, fed through the outbox."""

import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from sqlalchemy.orm import Session

from app.config import settings
from app.models import OutboxEmail
from app.services.outbox_service import OutboxService

logger = logging.getLogger(__name__)


class EmailService:
    """Transactional emails.

    The ``queue_*`` methods only add an outbox row to the caller's session,
    so the email is committed (or rolled back) together with the write that
    triggered it. ``send_email`` is the actual delivery, called by the
    outbox worker.
    """

    @staticmethod
    def send_email(to_email: str, subject: str, html_content: str) -> bool:
        """Send email via SendGrid. Returns True if successful."""
        if not settings.sendgrid_api_key:
            logger.warning("SendGrid API key not configured, skipping email send")
            return False

        message = Mail(
            from_email=(settings.email_from_address, settings.email_from_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )

        try:
            sg = SendGridAPIClient(settings.sendgrid_api_key)
            response = sg.send(message)
            logger.info(f"Email sent to {to_email}, status: {response.status_code}")
            return response.status_code in (200, 201, 202)
        except Exception:
            logger.exception(f"Failed to send email to {to_email}")
            return False

    @classmethod
    def queue_verification_email(cls, db: Session, email: str, name: str, token: str) -> OutboxEmail:
        """Queue the email verification link."""
        verify_url = f"{settings.frontend_url}/verify-email/{token}"
        html = f"""
        <h2>Welcome to Snapfeed, {name}!</h2>
        <p>Click the link below to verify your email address:</p>
        <p><a href="{verify_url}">{verify_url}</a></p>
        <p>This link expires in {settings.account_token_expire_hours} hours.</p>
        <p>If you didn't create an account, you can ignore this email.</p>
        """
        return OutboxService.enqueue(db, email, "Verify Your Email - Snapfeed", html)

    @classmethod
    def queue_welcome_email(cls, db: Session, email: str, name: str) -> OutboxEmail:
        """Queue the welcome email sent after verification."""
        login_url = f"{settings.frontend_url}/login"
        html = f"""
        <h2>You're all set, {name}!</h2>
        <p>Your email has been verified. You can now log in and start posting.</p>
        <p><a href="{login_url}">Log in to Snapfeed</a></p>
        """
        return OutboxService.enqueue(db, email, "Welcome to Snapfeed!", html)

    @classmethod
    def queue_password_reset_email(cls, db: Session, email: str, token: str) -> OutboxEmail:
        """Queue the password reset link."""
        reset_url = f"{settings.frontend_url}/reset-password/{token}"
        html = f"""
        <h2>Reset Your Password</h2>
        <p>Click the link below to reset your password:</p>
        <p><a href="{reset_url}">{reset_url}</a></p>
        <p>This link expires in {settings.account_token_expire_hours} hours.</p>
        <p>If you didn't request this, you can ignore this email.</p>
        """
        return OutboxService.enqueue(db, email, "Reset Your Password - Snapfeed", html)

    @classmethod
    def queue_password_changed_notification(cls, db: Session, email: str) -> OutboxEmail:
        """Queue the notice that a password was changed."""
        html = """
        <h2>Password Changed</h2>
        <p>Your password was successfully changed.</p>
        <p>If you didn't make this change, please contact support immediately.</p>
        """
        return OutboxService.enqueue(db, email, "Your Password Was Changed - Snapfeed", html)
