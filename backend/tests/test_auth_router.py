"""Integration tests for auth router."""

import pytest

from app.models import User
from tests.conftest import TEST_PASSWORD, extract_token

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"


def registration(**overrides) -> dict:
    data = {
        "name": "Bob",
        "email": "bob@example.com",
        "password": "hunter22",
        "password_confirmation": "hunter22",
    }
    data.update(overrides)
    return data


def field_errors(response) -> dict:
    return {d["field"]: d["message"] for d in response.json()["details"]}


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client):
        """Registration returns a message, never a session."""
        response = client.post(REGISTER_URL, json=registration())

        assert response.status_code == 201
        data = response.json()
        assert "message" in data
        assert "access_token" not in data

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"name": "B"}, "name"),
            ({"email": "not-an-email"}, "email"),
            ({"password": "short", "password_confirmation": "short"}, "password"),
            ({"password_confirmation": "different1"}, "password_confirmation"),
        ],
    )
    def test_register_validation_errors_name_the_field(self, client, overrides, field):
        response = client.post(REGISTER_URL, json=registration(**overrides))

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert field in field_errors(response)

    def test_password_mismatch_message(self, client):
        response = client.post(
            REGISTER_URL, json=registration(password_confirmation="different1")
        )

        assert field_errors(response)["password_confirmation"] == "Passwords do not match"

    def test_missing_fields(self, client):
        response = client.post(REGISTER_URL, json={})

        assert response.status_code == 400
        assert {"name", "email", "password", "password_confirmation"} <= set(
            field_errors(response)
        )

    def test_register_duplicate_email(self, client):
        client.post(REGISTER_URL, json=registration())
        response = client.post(REGISTER_URL, json=registration(name="Robert"))

        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client, make_user):
        user = make_user()

        response = client.post(
            LOGIN_URL, json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"] == {"id": user.id, "name": "Alice", "email": "alice@example.com"}

    def test_login_unverified(self, client):
        client.post(REGISTER_URL, json=registration())

        response = client.post(LOGIN_URL, json={"email": "bob@example.com", "password": "hunter22"})

        assert response.status_code == 403
        assert response.json()["error"] == "NotVerified"

    def test_login_failures_are_identical(self, client, make_user):
        """Unknown email and wrong password produce the same payload."""
        make_user()

        wrong_password = client.post(
            LOGIN_URL, json={"email": "alice@example.com", "password": "wrong-password"}
        )
        unknown_email = client.post(
            LOGIN_URL, json={"email": "nobody@example.com", "password": TEST_PASSWORD}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.content == unknown_email.content
        assert wrong_password.json()["error"] == "InvalidCredentials"


class TestVerifyEmail:
    """Tests for GET /auth/verify-email/{token}."""

    def test_register_verify_login(self, client, db_session_maker):
        client.post(REGISTER_URL, json=registration())
        credentials = {"email": "bob@example.com", "password": "hunter22"}
        assert client.post(LOGIN_URL, json=credentials).status_code == 403

        token = extract_token(db_session_maker, "bob@example.com", "verify-email")
        response = client.get(f"/api/v1/auth/verify-email/{token}")
        assert response.status_code == 200

        response = client.post(LOGIN_URL, json=credentials)
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Bob"

    def test_verify_link_used_twice(self, client, db_session_maker):
        client.post(REGISTER_URL, json=registration())
        token = extract_token(db_session_maker, "bob@example.com", "verify-email")
        client.get(f"/api/v1/auth/verify-email/{token}")

        response = client.get(f"/api/v1/auth/verify-email/{token}")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid"

    def test_verify_unknown_token(self, client):
        response = client.get("/api/v1/auth/verify-email/does-not-exist")
        assert response.status_code == 404

    def test_resend_verification(self, client, db_session_maker):
        client.post(REGISTER_URL, json=registration())
        first = extract_token(db_session_maker, "bob@example.com", "verify-email")

        response = client.post(
            "/api/v1/auth/resend-verification", json={"email": "bob@example.com"}
        )

        assert response.status_code == 200
        assert extract_token(db_session_maker, "bob@example.com", "verify-email") != first


class TestPasswordReset:
    """Tests for forgot and reset password endpoints."""

    def test_forgot_password_responses_are_byte_identical(self, client, make_user):
        make_user()

        known = client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        unknown = client.post(
            "/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.content == unknown.content

    def test_reset_flow(self, client, db_session_maker, make_user):
        make_user()
        client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        token = extract_token(db_session_maker, "alice@example.com", "reset-password")

        response = client.post(
            f"/api/v1/auth/reset-password/{token}",
            json={"password": "newpass1", "password_confirmation": "newpass1"},
        )
        assert response.status_code == 200

        old = client.post(LOGIN_URL, json={"email": "alice@example.com", "password": TEST_PASSWORD})
        new = client.post(LOGIN_URL, json={"email": "alice@example.com", "password": "newpass1"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_reset_password_mismatch(self, client, db_session_maker, make_user):
        make_user()
        client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        token = extract_token(db_session_maker, "alice@example.com", "reset-password")

        response = client.post(
            f"/api/v1/auth/reset-password/{token}",
            json={"password": "newpass1", "password_confirmation": "newpass2"},
        )

        assert response.status_code == 400
        assert "password_confirmation" in field_errors(response)

    def test_reset_with_verification_token(self, client, db_session_maker):
        client.post(REGISTER_URL, json=registration())
        token = extract_token(db_session_maker, "bob@example.com", "verify-email")

        response = client.post(
            f"/api/v1/auth/reset-password/{token}",
            json={"password": "newpass1", "password_confirmation": "newpass1"},
        )

        assert response.status_code == 400
        db = db_session_maker()
        try:
            assert db.query(User).one().verified is False
        finally:
            db.close()


class TestMe:
    """Tests for GET /auth/me."""

    def test_me_returns_current_user(self, client, make_user):
        make_user()
        login = client.post(
            LOGIN_URL, json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        token = login.json()["access_token"]

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"
