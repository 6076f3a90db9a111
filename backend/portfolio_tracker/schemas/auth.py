# backend/portfolio_tracker/schemas/auth.py
"""
Authentication request/response schemas.

Defines Pydantic models for:
- User registration
- Login and the issued bearer token
- Public user profile
- Role changes (admin only)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_tracker.models import UserRole


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================


class UserRegisterRequest(BaseModel):
    """Request body for user registration."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        description="Unique login name",
        examples=["alice"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (min 6 characters)",
        examples=["s3cret-pass"],
    )

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        return v


class UserLoginRequest(BaseModel):
    """Request body for user login."""

    username: str = Field(..., description="Login name", examples=["alice"])
    password: str = Field(..., description="Password", examples=["s3cret-pass"])

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class UserRoleUpdateRequest(BaseModel):
    """Request body for changing a user's role."""

    role: UserRole = Field(..., description="New role: 'admin' or 'user'")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class TokenResponse(BaseModel):
    """Response containing the bearer token issued at login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class UserResponse(BaseModel):
    """Public user profile; never exposes the password hash or token."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Login name")
    role: UserRole = Field(..., description="'admin' or 'user'")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")


class LoginResponse(BaseModel):
    """Login result: token plus the authenticated user."""

    token: TokenResponse
    user: UserResponse


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str = Field(..., description="Response message")
