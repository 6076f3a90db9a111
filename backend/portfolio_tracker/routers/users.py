# backend/portfolio_tracker/routers/users.py
"""
User and authentication endpoints.

- POST /users/register: create an account
- POST /users/login: issue a bearer token (stored on the user)
- POST /users/logout: invalidate the stored token
- GET /users/me: current user
- GET /users/{user_id}: public profile (authenticated callers)
- POST /users/{user_id}/role: change a role (admin only)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_auth_service, get_current_user, require_admin
from portfolio_tracker.middleware.rate_limit import (
    RATE_LIMIT_AUTH_LOGIN,
    RATE_LIMIT_AUTH_REGISTER,
    limiter,
)
from portfolio_tracker.models import User
from portfolio_tracker.schemas.auth import (
    LoginResponse,
    MessageResponse,
    TokenResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
    UserRoleUpdateRequest,
)
from portfolio_tracker.services.auth import AuthService
from portfolio_tracker.services.exceptions import UserNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# =============================================================================
# REGISTRATION & LOGIN
# =============================================================================


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@limiter.limit(RATE_LIMIT_AUTH_REGISTER)
def register(
    request: Request,  # Required for rate limiter
    data: UserRegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Create a user with the `user` role. Returns **409** if the username is taken."""
    return auth_service.register(db=db, username=data.username, password=data.password)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with username and password",
)
@limiter.limit(RATE_LIMIT_AUTH_LOGIN)
def login(
    request: Request,  # Required for rate limiter
    data: UserLoginRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """
    Authenticate and receive a bearer token.

    Any token issued by a previous login stops working.
    """
    user, issued = auth_service.login(db=db, username=data.username, password=data.password)
    return LoginResponse(
        token=TokenResponse(
            access_token=issued.access_token,
            token_type=issued.token_type,
            expires_in=issued.expires_in,
        ),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout (invalidate the current token)",
)
def logout(
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    auth_service.logout(db=db, user=current_user)
    return MessageResponse(message="Successfully logged out")


# =============================================================================
# PROFILE
# =============================================================================


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    return current_user


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user by ID",
)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Public profile of any user; the password hash and token are never returned."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


@router.post(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Change a user's role (admin only)",
)
def set_user_role(
    user_id: int,
    data: UserRoleUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    admin: Annotated[User, Depends(require_admin)],
) -> User:
    logger.info(f"Admin {admin.id} sets role of user {user_id} to {data.role.value}")
    return auth_service.set_role(db=db, user_id=user_id, role=data.role)
