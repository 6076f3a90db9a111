# backend/tests/services/auth/test_auth_service.py
"""
Tests for the core authentication service.

Tests:
- User registration
- Login issuing and storing a token
- Token authentication and revocation by logout or re-login
- Role changes
"""

import pytest

from portfolio_tracker.models import User, UserRole
from portfolio_tracker.services.auth.service import AuthService
from portfolio_tracker.services.exceptions import (
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)


@pytest.fixture
def auth_service() -> AuthService:
    return AuthService()


@pytest.fixture
def registered_user(db, auth_service) -> User:
    return auth_service.register(db, "carol", "password123")


# =============================================================================
# TEST: REGISTRATION
# =============================================================================


class TestRegister:

    def test_register_stores_hashed_password(self, db, registered_user):
        assert registered_user.id is not None
        assert registered_user.username == "carol"
        assert registered_user.role == UserRole.USER
        assert registered_user.hashed_password != "password123"
        assert registered_user.token is None

    def test_register_with_role(self, db, auth_service):
        user = auth_service.register(db, "root", "password123", role=UserRole.ADMIN)

        assert user.role == UserRole.ADMIN

    def test_duplicate_username(self, db, auth_service, registered_user):
        with pytest.raises(UserExistsError):
            auth_service.register(db, "carol", "other-password")


# =============================================================================
# TEST: LOGIN / AUTHENTICATE / LOGOUT
# =============================================================================


class TestLogin:

    def test_login_issues_and_stores_token(self, db, auth_service, registered_user):
        user, issued = auth_service.login(db, "carol", "password123")

        assert user.id == registered_user.id
        assert issued.token_type == "bearer"
        assert user.token == issued.access_token

    def test_wrong_password(self, db, auth_service, registered_user):
        with pytest.raises(InvalidCredentialsError):
            auth_service.login(db, "carol", "wrong")

    def test_unknown_user(self, db, auth_service):
        with pytest.raises(InvalidCredentialsError):
            auth_service.login(db, "nobody", "password123")


class TestAuthenticate:

    def test_current_token_authenticates(self, db, auth_service, registered_user):
        _, issued = auth_service.login(db, "carol", "password123")

        assert auth_service.authenticate(db, issued.access_token).id == registered_user.id

    def test_logout_revokes_token(self, db, auth_service, registered_user):
        user, issued = auth_service.login(db, "carol", "password123")
        auth_service.logout(db, user)

        with pytest.raises(InvalidCredentialsError, match="revoked"):
            auth_service.authenticate(db, issued.access_token)

    def test_token_must_match_stored_token(self, db, auth_service, registered_user):
        _, first = auth_service.login(db, "carol", "password123")
        db.get(User, registered_user.id).token = "something-else"
        db.commit()

        with pytest.raises(InvalidCredentialsError):
            auth_service.authenticate(db, first.access_token)


# =============================================================================
# TEST: ROLES
# =============================================================================


class TestSetRole:

    def test_promote(self, db, auth_service, registered_user):
        user = auth_service.set_role(db, registered_user.id, UserRole.ADMIN)

        assert user.role == UserRole.ADMIN

    def test_unknown_user(self, db, auth_service):
        with pytest.raises(UserNotFoundError):
            auth_service.set_role(db, 999, UserRole.ADMIN)
