"""Durable email outbox with retry and exponential backoff."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.config import settings
from app.models import OutboxEmail, OutboxStatus
from app.services.shared.datetime_utils import utcnow

logger = logging.getLogger(__name__)

# (to_address, subject, html_body) -> delivered?
EmailSender = Callable[[str, str, str], bool]

MAX_BACKOFF = timedelta(hours=6)

# Stored in place of a delivered or abandoned body
REDACTED_BODY = ""


@dataclass
class DrainResult:
    """Counts from one pass over the outbox."""

    sent: int = 0
    retried: int = 0
    failed: int = 0


class OutboxService:
    """Queue emails transactionally and deliver them later."""

    @staticmethod
    def enqueue(db: Session, to_address: str, subject: str, html_body: str) -> OutboxEmail:
        """Add a pending email to the session. The caller commits."""
        entry = OutboxEmail(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            status=OutboxStatus.PENDING,
            attempts=0,
            next_attempt_at=utcnow(),
        )
        db.add(entry)
        return entry

    @staticmethod
    def backoff_for(attempts: int) -> timedelta:
        """Delay before the next attempt after ``attempts`` failures."""
        delay = timedelta(seconds=settings.outbox_backoff_seconds * 2 ** (attempts - 1))
        return min(delay, MAX_BACKOFF)

    @staticmethod
    def due_statement(now: datetime) -> Select:
        """Oldest pending entry whose next attempt time has passed.

        The row is locked with SKIP LOCKED so overlapping workers never pick
        the same entry. SQLite has no row locks and renders no FOR UPDATE.
        """
        return (
            select(OutboxEmail)
            .where(
                OutboxEmail.status == OutboxStatus.PENDING,
                OutboxEmail.next_attempt_at <= now,
            )
            .order_by(OutboxEmail.next_attempt_at)
            .limit(1)
            .with_for_update(skip_locked=True)
        )

    @classmethod
    def claim_next_due(cls, db: Session, now: datetime) -> OutboxEmail | None:
        """Lock and return the next due entry, or None."""
        return db.scalars(cls.due_statement(now)).first()

    @classmethod
    def drain(
        cls,
        db: Session,
        sender: EmailSender,
        batch_size: int | None = None,
        max_attempts: int | None = None,
    ) -> DrainResult:
        """Deliver due emails once.

        Entries are claimed one at a time and committed individually, so the
        row lock is held across the send and one bad address never blocks or
        re-sends the rest of the batch. An entry that fails ``max_attempts``
        times is marked failed and left for inspection.

        Bodies can carry single-use links, so they are cleared as soon as an
        entry is sent or has failed for good.
        """
        batch_size = batch_size or settings.outbox_batch_size
        max_attempts = max_attempts or settings.outbox_max_attempts
        result = DrainResult()
        now = utcnow()

        for _ in range(batch_size):
            entry = cls.claim_next_due(db, now)
            if entry is None:
                break

            entry.attempts += 1
            try:
                delivered = sender(entry.to_address, entry.subject, entry.html_body)
                error = None if delivered else "provider rejected message"
            except Exception as e:
                logger.exception(f"Outbox delivery raised for entry {entry.id}")
                delivered = False
                error = str(e)[:500]

            if delivered:
                entry.status = OutboxStatus.SENT
                entry.sent_at = utcnow()
                entry.last_error = None
                entry.html_body = REDACTED_BODY
                result.sent += 1
            elif entry.attempts >= max_attempts:
                entry.status = OutboxStatus.FAILED
                entry.last_error = error
                entry.html_body = REDACTED_BODY
                result.failed += 1
                logger.error(
                    f"Outbox entry {entry.id} to {entry.to_address} failed "
                    f"after {entry.attempts} attempts: {error}"
                )
            else:
                entry.next_attempt_at = utcnow() + cls.backoff_for(entry.attempts)
                entry.last_error = error
                result.retried += 1
                logger.warning(
                    f"Outbox entry {entry.id} attempt {entry.attempts} failed, "
                    f"retrying at {entry.next_attempt_at.isoformat()}"
                )
            db.commit()

        return result
