"""Signed session credentials (JWT)."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from app.config import settings
from app.exceptions import ForbiddenError
from app.services.shared.datetime_utils import utcnow

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"


@dataclass
class SessionClaims:
    """Verified claims carried by a session token."""

    user_id: str
    name: str
    issued_at: datetime
    expires_at: datetime


class SessionSigner:
    """Issue and verify bearer session tokens."""

    @staticmethod
    def create_session_token(
        user_id: str,
        name: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed session token binding the user id and name."""
        if expires_delta is None:
            expires_delta = timedelta(hours=settings.session_token_expire_hours)

        now = utcnow()
        payload = {
            "sub": user_id,
            "name": name,
            "iat": now,
            "exp": now + expires_delta,
            "type": SESSION_TOKEN_TYPE,
        }
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def verify_session_token(token: str) -> SessionClaims:
        """Validate signature, expiry and token type.

        Raises:
            ForbiddenError: if the token is expired, tampered with, or not a
                session token.
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Session token expired")
            raise ForbiddenError("Invalid or expired token")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid session token: {e}")
            raise ForbiddenError("Invalid or expired token")

        if payload.get("type") != SESSION_TOKEN_TYPE:
            raise ForbiddenError("Invalid token type")

        return SessionClaims(
            user_id=payload["sub"],
            name=payload.get("name", ""),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
