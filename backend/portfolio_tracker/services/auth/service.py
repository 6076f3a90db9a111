"""
Core authentication service.

Handles:
- User registration
- Login (username/password), storing the issued token on the user
- Logout (clearing the stored token)
- Role changes

A request is authenticated only when its bearer token is both a valid JWT
and the token currently stored on the user. Logging in again therefore
invalidates the previous token.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from portfolio_tracker.config import settings
from portfolio_tracker.models import User, UserRole
from portfolio_tracker.services.auth.jwt_handler import JWTHandler
from portfolio_tracker.services.auth.password import PasswordService
from portfolio_tracker.services.exceptions import (
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    """Access token issued at login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = settings.jwt_access_token_expire_minutes * 60


class AuthService:
    """
    Manages user registration, login and the stored session token.
    """

    def register(
        self,
        db: Session,
        username: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Register a new user.

        Raises:
            UserExistsError: If the username is taken
        """
        existing_user = db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

        if existing_user:
            raise UserExistsError(username)

        user = User(
            username=username,
            hashed_password=PasswordService.hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"User registered: {user.username} (id={user.id})")
        return user

    def login(self, db: Session, username: str, password: str) -> tuple[User, IssuedToken]:
        """
        Check credentials and issue a new access token.

        The token replaces any token stored on the user.

        Raises:
            InvalidCredentialsError: Unknown username or wrong password
        """
        user = db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

        if user is None or not PasswordService.verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for username '{username}'")
            raise InvalidCredentialsError()

        if PasswordService.needs_rehash(user.hashed_password):
            user.hashed_password = PasswordService.hash_password(password)

        access_token = JWTHandler.create_access_token(
            user_id=user.id,
            username=user.username,
            role=user.role,
        )
        user.token = access_token
        db.commit()
        db.refresh(user)

        logger.info(f"User logged in: {user.username}")
        return user, IssuedToken(access_token=access_token)

    def logout(self, db: Session, user: User) -> None:
        """Forget the stored token; the bearer token stops working immediately."""
        user.token = None
        db.commit()
        logger.info(f"User logged out: {user.username}")

    def authenticate(self, db: Session, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            TokenExpiredError: If the JWT has expired
            InvalidCredentialsError: Invalid JWT, unknown user, or a token
                that is no longer the one stored on the user
        """
        payload = JWTHandler.validate_access_token(token)
        user = db.get(User, int(payload["sub"]))

        if user is None:
            raise InvalidCredentialsError("User not found")
        if user.token != token:
            raise InvalidCredentialsError("Token has been revoked")

        return user

    def set_role(self, db: Session, user_id: int, role: UserRole) -> User:
        """
        Change a user's role.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        user.role = role
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.username} role set to {role.value}")
        return user
