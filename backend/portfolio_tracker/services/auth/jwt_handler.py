"""
JWT access token creation and validation.

Tokens are signed with settings.jwt_secret_key (HS256 by default). The
last token issued at login is also stored on the user row, so logout can
invalidate it before it expires (see dependencies.get_current_user).
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from portfolio_tracker.config import settings
from portfolio_tracker.models import UserRole
from portfolio_tracker.services.exceptions import TokenExpiredError, InvalidCredentialsError


class JWTHandler:
    """
    Handles JWT token creation and validation.

    Access tokens contain:
    - sub: User ID (string)
    - username: Login name
    - role: "admin" or "user"
    - exp / iat: Expiration and issue timestamps
    - type: "access"
    """

    @staticmethod
    def create_access_token(
        user_id: int,
        username: str,
        role: UserRole = UserRole.USER,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user_id: The user's database ID
            username: The user's login name
            role: Role embedded for display; authorization re-reads the user row
            expires_delta: Optional custom lifetime

        Returns:
            Encoded JWT string
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "username": username,
            "role": UserRole(role).value,
            "exp": now + expires_delta,
            "iat": now,
            "type": "access",
        }

        return jwt.encode(
            payload,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

    @staticmethod
    def validate_access_token(token: str) -> dict[str, Any]:
        """
        Validate an access token and return its payload.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidCredentialsError: If the token is invalid or malformed
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("access")
        except JWTError as e:
            raise InvalidCredentialsError(f"Invalid token: {str(e)}")

        if payload.get("type") != "access":
            raise InvalidCredentialsError("Invalid token type")
        if not str(payload.get("sub", "")).isdigit():
            raise InvalidCredentialsError("Invalid token subject")

        return payload
