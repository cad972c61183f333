"""Password and token hashing."""

import hashlib
import logging
from functools import lru_cache

import bcrypt

from app.config import settings

logger = logging.getLogger(__name__)


class PasswordService:
    """bcrypt password hashing and SHA-256 token digests."""

    @staticmethod
    @lru_cache(maxsize=1)
    def get_dummy_hash() -> str:
        """Hash compared against when a login email is unknown.

        Keeps the unknown-email path as slow as the wrong-password path so
        response timing does not reveal which emails are registered.
        """
        return PasswordService.hash_password("dummy-password-for-timing")

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify a password against its hash (constant-time via bcrypt)."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    @staticmethod
    def hash_token(token: str) -> str:
        """Hash an account token using SHA-256 for storage and lookup."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
