"""Account lifecycle: registration, login, verification, password reset."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import ConflictError, InvalidCredentialsError, NotVerifiedError
from app.models import TokenPurpose, User
from app.schemas.auth import ResetPasswordRequest, UserRegister
from app.services.account_token_service import AccountTokenService
from app.services.email_service import EmailService
from app.services.password_service import PasswordService
from app.services.repositories import UserRepository
from app.services.session_signer import SessionSigner

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Registration successful. Please check your email to verify your account."
VERIFIED_MESSAGE = "Email verified successfully. You can now log in."
FORGOT_PASSWORD_MESSAGE = "If that email exists, we sent a password reset link."
RESEND_VERIFICATION_MESSAGE = (
    "If that email exists and is unverified, we sent a new verification link."
)
PASSWORD_RESET_MESSAGE = "Password reset successfully. You can now log in with your new password."


@dataclass
class LoginResult:
    """Session token plus the user it was issued for."""

    access_token: str
    user: User


class AuthService:
    """Orchestrates the credential store, account tokens and email outbox.

    Every write flow runs inside a single transaction, including the outbox
    row for its email, so a crash part-way through leaves nothing behind.
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._users = UserRepository(db)
        self._tokens = AccountTokenService(db)

    def register(self, data: UserRegister) -> str:
        """Create an unverified user and queue the verification email."""
        with transaction(self._db):
            if self._users.find_by_email(data.email) is not None:
                raise ConflictError("Email already registered")

            try:
                user = self._users.create(
                    name=data.name,
                    email=data.email,
                    password_hash=PasswordService.hash_password(data.password),
                )
            except IntegrityError:
                raise ConflictError("Email already registered") from None
            token = self._tokens.issue(user.id, TokenPurpose.EMAIL_CONFIRM)
            EmailService.queue_verification_email(self._db, user.email, user.name, token)

        logger.info(f"User registered (pending verification): {user.email}")
        return REGISTERED_MESSAGE

    def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a session token.

        Unknown email and wrong password raise the same error, and the
        unknown-email path still runs a bcrypt comparison.
        """
        user = self._users.find_by_email(email)
        if user is None:
            PasswordService.verify_password(password, PasswordService.get_dummy_hash())
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not PasswordService.verify_password(password, user.password_hash):
            logger.info(f"Login failed: wrong password for user {user.id}")
            raise InvalidCredentialsError()

        if not user.verified or not user.active:
            logger.info(f"Login blocked, email not verified: {user.id}")
            raise NotVerifiedError()

        access_token = SessionSigner.create_session_token(user.id, user.name)
        logger.info(f"User logged in: {user.email}")
        return LoginResult(access_token=access_token, user=user)

    def verify_email(self, token: str) -> str:
        """Consume an email confirmation token and activate its user."""
        with transaction(self._db):
            user_id = self._tokens.consume(token, TokenPurpose.EMAIL_CONFIRM)
            user = self._users.get_by_id(user_id)
            user.verified = True
            user.active = True
            EmailService.queue_welcome_email(self._db, user.email, user.name)

        logger.info(f"Email verified for user: {user.email}")
        return VERIFIED_MESSAGE

    def resend_verification(self, email: str) -> str:
        """Issue another confirmation link for an unverified user.

        Earlier links stay valid. The response never reveals whether the
        email exists.
        """
        with transaction(self._db):
            user = self._users.find_by_email(email)
            if user is not None and not user.verified:
                token = self._tokens.issue(user.id, TokenPurpose.EMAIL_CONFIRM)
                EmailService.queue_verification_email(self._db, user.email, user.name, token)
                logger.info(f"Verification email resent to: {user.email}")

        return RESEND_VERIFICATION_MESSAGE

    def forgot_password(self, email: str) -> str:
        """Queue a reset link if the user exists; same answer either way."""
        with transaction(self._db):
            user = self._users.find_by_email(email)
            if user is not None:
                token = self._tokens.issue(user.id, TokenPurpose.PASSWORD_RESET)
                EmailService.queue_password_reset_email(self._db, user.email, token)
                logger.info(f"Password reset email queued for: {user.email}")

        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, data: ResetPasswordRequest) -> str:
        """Consume a reset token and store the new password hash."""
        with transaction(self._db):
            user_id = self._tokens.consume(token, TokenPurpose.PASSWORD_RESET)
            user = self._users.get_by_id(user_id)
            user.password_hash = PasswordService.hash_password(data.password)
            EmailService.queue_password_changed_notification(self._db, user.email)

        logger.info(f"Password reset for user: {user.email}")
        return PASSWORD_RESET_MESSAGE
