"""Account token data access layer."""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models import AccountToken, TokenPurpose


class AccountTokenRepository:
    """Centralized account token data access."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(
        self, *, user_id: str, token_hash: str, purpose: TokenPurpose, expires_at: datetime
    ) -> AccountToken:
        """Insert an active token."""
        record = AccountToken(
            user_id=user_id,
            token_hash=token_hash,
            purpose=purpose,
            expires_at=expires_at,
            active=True,
        )
        self._db.add(record)
        self._db.flush()
        return record

    def find_by_hash(self, token_hash: str) -> AccountToken | None:
        """Find token by its SHA-256 digest."""
        return self._db.query(AccountToken).filter(AccountToken.token_hash == token_hash).first()

    def deactivate_if_active(self, token_id: str, consumed_at: datetime) -> bool:
        """Flip an active token to inactive in a single conditional update.

        Returns:
            True if this call performed the flip, False if the token was
            already inactive (e.g. a concurrent consumer got there first).
        """
        result = self._db.execute(
            update(AccountToken)
            .where(AccountToken.id == token_id, AccountToken.active.is_(True))
            .values(active=False, consumed_at=consumed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
