# backend/tests/routers/test_users_api.py
"""
Integration tests for the user endpoints.

- POST /users/register, /users/login, /users/logout
- GET /users/me, /users/{id}
- POST /users/{id}/role (admin only)
"""

from conftest import create_user, get_auth_headers
from portfolio_tracker.models import User, UserRole


def register(client, username="carol", password="password123"):
    return client.post("/users/register", json={"username": username, "password": password})


def login(client, username="carol", password="password123"):
    return client.post("/users/login", json={"username": username, "password": password})


# =============================================================================
# REGISTRATION & LOGIN
# =============================================================================

class TestRegister:

    def test_register(self, client):
        response = register(client)

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "carol"
        assert data["role"] == "user"
        assert "hashed_password" not in data
        assert "token" not in data

    def test_username_is_trimmed(self, client):
        response = register(client, username="  carol  ")

        assert response.json()["username"] == "carol"

    def test_duplicate_username(self, client):
        register(client)

        response = register(client, password="another-password")

        assert response.status_code == 409
        assert response.json()["error"] == "UserExistsError"

    def test_short_password(self, client):
        response = register(client, password="123")

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"


class TestLogin:

    def test_login_returns_token_and_user(self, client):
        register(client)

        response = login(client)

        assert response.status_code == 200
        data = response.json()
        assert data["token"]["token_type"] == "bearer"
        assert data["token"]["expires_in"] > 0
        assert data["user"]["username"] == "carol"

    def test_token_authenticates(self, client):
        register(client)
        token = login(client).json()["token"]["access_token"]

        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["username"] == "carol"

    def test_wrong_password(self, client):
        register(client)

        response = login(client, password="wrong-password")

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidCredentialsError"


class TestLogout:

    def test_logout_invalidates_token(self, client, db, sample_user):
        headers = get_auth_headers(db, sample_user)

        response = client.post("/users/logout", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Successfully logged out"}

        response = client.get("/users/me", headers=headers)
        assert response.status_code == 401

    def test_logout_requires_token(self, client):
        response = client.post("/users/logout")

        assert response.status_code == 401


# =============================================================================
# PROFILE
# =============================================================================

class TestProfile:

    def test_me_without_token(self, client):
        response = client.get("/users/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Not authenticated"

    def test_me_with_garbage_token(self, client):
        response = client.get("/users/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"

    def test_get_user(self, client, db, sample_user):
        other = create_user(db, username="bob")

        response = client.get(f"/users/{other.id}", headers=get_auth_headers(db, sample_user))

        assert response.status_code == 200
        assert response.json()["username"] == "bob"

    def test_get_missing_user(self, client, db, sample_user):
        response = client.get("/users/999", headers=get_auth_headers(db, sample_user))

        assert response.status_code == 404
        assert response.json()["error"] == "UserNotFoundError"


# =============================================================================
# ROLES
# =============================================================================

class TestRole:

    def test_admin_promotes_user(self, client, db, sample_user, sample_admin):
        response = client.post(
            f"/users/{sample_user.id}/role",
            json={"role": "admin"},
            headers=get_auth_headers(db, sample_admin),
        )

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        db.expire_all()
        assert db.get(User, sample_user.id).role == UserRole.ADMIN

    def test_non_admin_is_forbidden(self, client, db, sample_user):
        response = client.post(
            f"/users/{sample_user.id}/role",
            json={"role": "admin"},
            headers=get_auth_headers(db, sample_user),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Admin role required"

    def test_invalid_role(self, client, db, sample_user, sample_admin):
        response = client.post(
            f"/users/{sample_user.id}/role",
            json={"role": "superuser"},
            headers=get_auth_headers(db, sample_admin),
        )

        assert response.status_code == 422
