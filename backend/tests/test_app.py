"""Tests for application wiring and error rendering."""

from fastapi import APIRouter
from fastapi.testclient import TestClient

from app.config import Settings, settings
from app.exceptions import ConflictError, NotFoundError, UpstreamError
from app.main import app
from tests.conftest import auth_headers


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_lifespan_owns_the_session_factory(client):
    assert app.state.session_factory is not None
    assert app.state.engine is not None


def test_error_payload_shape(client, make_user):
    user = make_user()

    response = client.get("/api/v1/post/missing", headers=auth_headers(user))

    assert response.status_code == 404
    assert response.json() == {
        "error": "NotFound",
        "message": "Post not found",
        "details": None,
        "path": "/api/v1/post/missing",
    }


def test_domain_errors_map_to_status_codes():
    assert ConflictError().status_code == 409
    assert NotFoundError("Post").status_code == 404
    assert UpstreamError().status_code == 502


def test_unhandled_errors_are_hidden():
    """Unexpected exceptions surface as a generic 500 without internals."""
    router = APIRouter()

    @router.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    app.include_router(router, prefix="/test-only")
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/test-only/boom")
    finally:
        app.router.routes = [
            r for r in app.router.routes if getattr(r, "path", "") != "/test-only/boom"
        ]

    assert response.status_code == 500
    assert response.json()["error"] == "ServerError"
    assert "hunter2" not in response.text


def test_settings_expose_only_used_keys():
    assert "debug" not in Settings.model_fields
    assert settings.max_upload_bytes > 0
