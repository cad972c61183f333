"""Deliver queued emails from the outbox.

Run once (e.g. from cron) or as a long-lived worker:

    python -m scripts.deliver_outbox --once
    python -m scripts.deliver_outbox --interval 10
"""

import argparse
import logging
import time

from app.config import settings
from app.database import create_db_engine, create_session_factory
from app.services.email_service import EmailService
from app.services.outbox_service import DrainResult, OutboxService

logger = logging.getLogger(__name__)


def deliver_once(session_factory) -> DrainResult:
    """Run a single drain pass with a fresh session."""
    db = session_factory()
    try:
        result = OutboxService.drain(db, EmailService.send_email)
    finally:
        db.close()

    if result.sent or result.retried or result.failed:
        logger.info(
            "Outbox pass: sent=%d retried=%d failed=%d",
            result.sent,
            result.retried,
            result.failed,
        )
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Deliver queued emails")
    parser.add_argument("--once", action="store_true", help="Drain once and exit")
    parser.add_argument(
        "--interval", type=float, default=5.0, help="Seconds between passes (default: 5)"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = create_db_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    try:
        if args.once:
            deliver_once(session_factory)
            return

        logger.info("Outbox worker started (interval=%ss)", args.interval)
        while True:
            deliver_once(session_factory)
            time.sleep(args.interval)
    except KeyboardInterrupt:
        logger.info("Outbox worker stopped")
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
