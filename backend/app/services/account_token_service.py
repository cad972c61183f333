"""Issue and consume single-use account tokens."""

import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, TokenExpiredError, TokenInvalidError
from app.models import TokenPurpose
from app.services.password_service import PasswordService
from app.services.repositories import AccountTokenRepository
from app.services.shared.datetime_utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class AccountTokenService:
    """Single-use, time-limited, purpose-tagged tokens.

    Only the SHA-256 digest of a token is stored; the raw value is returned
    once from ``issue`` for embedding in an email link. Issuing a new token
    leaves earlier unconsumed tokens for the same user and purpose valid
    until each is consumed or expires.

    The caller owns the transaction: neither method commits.
    """

    def __init__(self, db: Session) -> None:
        self._tokens = AccountTokenRepository(db)

    def issue(
        self,
        user_id: str,
        purpose: TokenPurpose,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an active token for the user and return its raw value."""
        if expires_delta is None:
            expires_delta = timedelta(hours=settings.account_token_expire_hours)

        token = secrets.token_urlsafe(32)
        self._tokens.create(
            user_id=user_id,
            token_hash=PasswordService.hash_token(token),
            purpose=purpose,
            expires_at=utcnow() + expires_delta,
        )
        logger.debug(f"Issued {purpose.value} token for user {user_id}")
        return token

    def consume(self, token: str, expected_purpose: TokenPurpose) -> str:
        """Validate and deactivate a token, returning the owning user id.

        Raises:
            NotFoundError: no token matches.
            TokenExpiredError: the token is past its expiry, whatever its state.
            TokenInvalidError: the token was already used, was issued for a
                different purpose, or a concurrent consumer won the race.
        """
        record = self._tokens.find_by_hash(PasswordService.hash_token(token))
        if record is None:
            raise NotFoundError("Token")

        now = utcnow()
        if now >= as_utc(record.expires_at):
            raise TokenExpiredError()

        if not record.active or record.purpose != expected_purpose:
            raise TokenInvalidError()

        if not self._tokens.deactivate_if_active(record.id, consumed_at=now):
            logger.warning(f"Token {record.id} consumed concurrently")
            raise TokenInvalidError()

        return record.user_id
