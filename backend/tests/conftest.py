"""Shared test fixtures."""

import os

# Must be set before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SENDGRID_API_KEY", "")

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.dependencies.storage import get_blob_store
from app.exceptions import UpstreamError
from app.main import app
from app.models import OutboxEmail, User
from app.services.blob_store import BlobStore, generate_blob_key
from app.services.password_service import PasswordService
from app.services.session_signer import SessionSigner

TEST_PASSWORD = "secret1"


class FakeBlobStore(BlobStore):
    """In-memory blob store recording every upload."""

    def __init__(self, fail: bool = False):
        self.objects: dict[str, tuple[str, bytes]] = {}
        self.fail = fail

    def put(self, key_hint, mime, data):
        if self.fail:
            raise UpstreamError("Image upload failed")
        key = generate_blob_key(key_hint)
        self.objects[key] = (mime, data)
        return key

    def presigned_get(self, key):
        return f"https://blobs.test/{key}?signature=test"


def extract_token(db_session_maker, email: str, route: str) -> str:
    """Pull the token out of the newest queued email linking to ``route``."""
    db = db_session_maker()
    try:
        entries = (
            db.query(OutboxEmail)
            .filter(OutboxEmail.to_address == email)
            .order_by(OutboxEmail.next_attempt_at.desc())
            .all()
        )
    finally:
        db.close()

    for entry in entries:
        match = re.search(rf"/{route}/([\w-]+)", entry.html_body)
        if match:
            return match.group(1)
    raise AssertionError(f"No {route} link queued for {email}")


def auth_headers(user: User) -> dict:
    """Bearer header for a user."""
    token = SessionSigner.create_session_token(user.id, user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine():
    """In-memory database shared across connections."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session_maker(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(db_session_maker):
    """A session for service-level tests."""
    session = db_session_maker()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def make_user(db_session_maker):
    """Factory creating users directly in the database."""

    def _make_user(
        name: str = "Alice",
        email: str = "alice@example.com",
        password: str = TEST_PASSWORD,
        verified: bool = True,
    ) -> User:
        db = db_session_maker()
        try:
            user = User(
                name=name,
                email=email,
                password_hash=PasswordService.hash_password(password),
                verified=verified,
                active=verified,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        finally:
            db.close()

    return _make_user


@pytest.fixture
def client(db_session_maker, blob_store):
    """Test client wired to the in-memory database and fake blob store."""

    def override_get_db():
        db = db_session_maker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
