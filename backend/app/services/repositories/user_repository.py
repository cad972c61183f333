"""User data access layer."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Centralized user data access.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises exception if missing
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, user_id: str) -> User | None:
        """Find user by primary key."""
        return self._db.query(User).filter(User.id == user_id).first()

    def get_by_id(self, user_id: str) -> User:
        """Get user by primary key, raising NotFoundError if missing."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive)."""
        return (
            self._db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
        )

    def create(self, *, name: str, email: str, password_hash: str) -> User:
        """Insert an unverified, inactive user."""
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            verified=False,
            active=False,
        )
        self._db.add(user)
        self._db.flush()
        logger.debug(f"Created user {user.id}")
        return user
