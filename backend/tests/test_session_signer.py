"""Tests for session token signing and verification."""

from datetime import timedelta

import jwt
import pytest

from app.config import settings
from app.exceptions import ForbiddenError
from app.services.session_signer import SessionSigner
from app.services.shared.datetime_utils import utcnow


def test_round_trip_carries_user_id_and_name():
    token = SessionSigner.create_session_token("user-1", "Alice")

    claims = SessionSigner.verify_session_token(token)

    assert claims.user_id == "user-1"
    assert claims.name == "Alice"


def test_default_lifetime_is_24_hours():
    claims = SessionSigner.verify_session_token(SessionSigner.create_session_token("u", "A"))

    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_expired_token_is_rejected():
    token = SessionSigner.create_session_token("u", "A", expires_delta=timedelta(seconds=-1))

    with pytest.raises(ForbiddenError):
        SessionSigner.verify_session_token(token)


def test_tampered_token_is_rejected():
    token = SessionSigner.create_session_token("u", "A")
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}.{signature[::-1]}"

    with pytest.raises(ForbiddenError):
        SessionSigner.verify_session_token(tampered)


def test_token_signed_with_other_key_is_rejected():
    now = utcnow()
    token = jwt.encode(
        {"sub": "u", "name": "A", "iat": now, "exp": now + timedelta(hours=1), "type": "session"},
        "some-other-secret-key-of-sufficient-length",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(ForbiddenError):
        SessionSigner.verify_session_token(token)


def test_token_of_other_type_is_rejected():
    now = utcnow()
    token = jwt.encode(
        {"sub": "u", "iat": now, "exp": now + timedelta(hours=1), "type": "refresh"},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(ForbiddenError, match="Invalid token type"):
        SessionSigner.verify_session_token(token)


def test_token_missing_subject_is_rejected():
    now = utcnow()
    token = jwt.encode(
        {"iat": now, "exp": now + timedelta(hours=1), "type": "session"},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(ForbiddenError):
        SessionSigner.verify_session_token(token)


def test_garbage_is_rejected():
    with pytest.raises(ForbiddenError):
        SessionSigner.verify_session_token("not-a-jwt")
