"""Tests for the outbox delivery script."""

from unittest.mock import patch

from app.models import OutboxEmail, OutboxStatus
from app.services.outbox_service import OutboxService
from scripts.deliver_outbox import deliver_once


@patch("scripts.deliver_outbox.EmailService.send_email", return_value=True)
def test_deliver_once_sends_due_emails(mock_send, db, db_session_maker):
    OutboxService.enqueue(db, "alice@example.com", "Hello", "<p>Hi</p>")
    db.commit()

    result = deliver_once(db_session_maker)

    assert result.sent == 1
    mock_send.assert_called_once_with("alice@example.com", "Hello", "<p>Hi</p>")
    assert db.query(OutboxEmail).populate_existing().one().status == OutboxStatus.SENT


@patch("scripts.deliver_outbox.EmailService.send_email", return_value=False)
def test_deliver_once_without_provider_keeps_entries_pending(mock_send, db, db_session_maker):
    OutboxService.enqueue(db, "alice@example.com", "Hello", "<p>Hi</p>")
    db.commit()

    result = deliver_once(db_session_maker)

    assert result.retried == 1
    assert db.query(OutboxEmail).populate_existing().one().status == OutboxStatus.PENDING


def test_deliver_once_with_empty_outbox(db_session_maker):
    result = deliver_once(db_session_maker)
    assert (result.sent, result.retried, result.failed) == (0, 0, 0)
