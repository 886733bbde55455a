"""
Integration tests for Authentication API.

Tests the full auth flow including:
- Login/logout
- Session cookie handling
- Current user lookup
"""
import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.config import settings
from app.models import Session as UserSession
from tests.factories import create_user, create_session


pytestmark = pytest.mark.integration


class TestLoginFlow:
    """Tests for login functionality."""

    def test_login_success(self, client: TestClient, db: Session):
        user = create_user(db, email="test@example.com", password="password123")

        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        )

        assert response.status_code == 200
        assert response.json() == {"id": str(user.id), "email": "test@example.com"}
        assert settings.session_cookie_name in response.cookies
        assert db.query(UserSession).filter(UserSession.user_id == user.id).count() == 1

    def test_login_wrong_password(self, client: TestClient, db: Session):
        create_user(db, email="test@example.com", password="password123")

        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_nonexistent_user(self, client: TestClient):
        response = client.post(
            "/auth/login",
            json={"email": "nonexistent@example.com", "password": "password"},
        )

        assert response.status_code == 401

    def test_login_invalid_email(self, client: TestClient):
        response = client.post(
            "/auth/login", json={"email": "not-an-email", "password": "password"}
        )

        assert response.status_code == 422


class TestSession:
    def test_me_returns_current_user(self, auth_client: TestClient, test_user):
        response = auth_client.get("/auth/me")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user.email
        assert data["first_name"] == "Test"
        assert data["is_admin"] is False

    def test_me_requires_login(self, client: TestClient):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_me_with_expired_session(self, client: TestClient, db: Session, test_user):
        session = create_session(db, test_user, expires_in=timedelta(minutes=-1))
        client.cookies.set(settings.session_cookie_name, session.token)

        response = client.get("/auth/me")

        assert response.status_code == 401

    def test_logout_revokes_session(
        self, auth_client: TestClient, db: Session, test_session: UserSession
    ):
        token = test_session.token

        response = auth_client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert db.query(UserSession).filter(UserSession.token == token).first() is None

    def test_logout_without_session(self, client: TestClient):
        response = client.post("/auth/logout")

        assert response.status_code == 200


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
