"""
Tests for Authentication

Covers:
- Registration (POST /auth/register)
- Login (POST /auth/login)
- Current user profile (GET /auth/me)
- Bearer token handling on protected endpoints
"""

from datetime import timedelta

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.models import User
from bookstore.services.security import create_access_token, verify_password


class TestRegister:
    """Tests for POST /auth/register"""

    def test_register_success(self, client: TestClient, db_session: Session):
        """A new account is created and returned without its password."""
        response = client.post(
            "/auth/register",
            json={
                "email": "newuser@example.com",
                "password": "secret123",
                "username": "newuser",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered"

        data = body["data"]
        assert data["email"] == "newuser@example.com"
        assert data["username"] == "newuser"
        assert "id" in data
        assert "created_at" in data
        assert "password" not in data
        assert "hashed_password" not in data

        user = db_session.scalar(select(User).where(User.email == "newuser@example.com"))
        assert user is not None
        assert user.hashed_password != "secret123"
        assert verify_password("secret123", user.hashed_password)

    def test_register_without_username(self, client: TestClient):
        """Username is optional."""
        response = client.post(
            "/auth/register",
            json={"email": "minimal@example.com", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["username"] is None

    def test_register_duplicate_email(self, client: TestClient, db_session: Session, sample_user):
        """Registering an existing email fails and creates no second row."""
        response = client.post(
            "/auth/register",
            json={"email": sample_user.email, "password": "another123"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Email already registered"

        count = db_session.scalar(
            select(func.count()).select_from(User).where(User.email == sample_user.email)
        )
        assert count == 1

    def test_register_duplicate_email_different_case(self, client: TestClient, sample_user):
        """Emails are compared case-insensitively."""
        response = client.post(
            "/auth/register",
            json={"email": "TestUser@Example.com", "password": "another123"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_short_password(self, client: TestClient):
        """Passwords shorter than 6 characters are rejected."""
        response = client.post(
            "/auth/register",
            json={"email": "short@example.com", "password": "12345"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation error"
        assert any(error["field"] == "password" for error in body["errors"])

    def test_register_invalid_email(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["field"] == "email" for error in response.json()["errors"])

    def test_register_missing_fields(self, client: TestClient):
        response = client.post("/auth/register", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"email", "password"} <= fields


class TestLogin:
    """Tests for POST /auth/login"""

    def test_login_success(self, client: TestClient, sample_user):
        """Valid credentials return a bearer token and the user."""
        response = client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Login successful"

        data = body["data"]
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"] == {
            "id": sample_user.id,
            "email": "testuser@example.com",
            "username": "testuser",
        }

    def test_login_token_works(self, client: TestClient, sample_user):
        """The issued token authenticates /auth/me."""
        login = client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "secret123"},
        )
        token = login.json()["data"]["token"]

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["id"] == sample_user.id

    def test_login_email_case_insensitive(self, client: TestClient, sample_user):
        response = client.post(
            "/auth/login",
            json={"email": "TESTUSER@example.com", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_login_wrong_password(self, client: TestClient, sample_user):
        """A wrong password gets the same message as an unknown email."""
        response = client.post(
            "/auth/login",
            json={"email": "testuser@example.com", "password": "wrongpass"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid email or password"

    def test_login_unknown_email(self, client: TestClient):
        response = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid email or password"

    def test_login_missing_password(self, client: TestClient):
        response = client.post("/auth/login", json={"email": "testuser@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Validation error"


class TestMe:
    """Tests for GET /auth/me"""

    def test_me(self, client: TestClient, sample_user, auth_headers):
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == sample_user.id
        assert data["email"] == "testuser@example.com"
        assert data["username"] == "testuser"
        assert "hashed_password" not in data

    def test_me_without_token(self, client: TestClient):
        response = client.get("/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Token missing"

    def test_me_invalid_token(self, client: TestClient):
        response = client.get(
            "/auth/me",
            headers={"Authorization": "Bearer not.a.valid.token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid token"

    def test_me_expired_token(self, client: TestClient, sample_user):
        token = create_access_token(
            {"sub": str(sample_user.id)},
            expires_delta=timedelta(minutes=-1),
        )

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid token"

    def test_me_token_with_non_numeric_subject(self, client: TestClient):
        token = create_access_token({"sub": "someone"})

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid token"

    def test_me_deleted_user(
        self,
        client: TestClient,
        db_session: Session,
        sample_user,
        auth_headers,
    ):
        """A valid token for a user that no longer exists is a 404."""
        db_session.delete(sample_user)
        db_session.commit()

        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "User not found"
