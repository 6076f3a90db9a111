"""
Authentication services for the Portfolio Tracker.

This module provides:
- Password hashing and verification (bcrypt)
- JWT access token creation and validation
- Core authentication service (AuthService)

Usage:
    from portfolio_tracker.services.auth import AuthService, PasswordService, JWTHandler

    hashed = PasswordService.hash_password("mypassword")
    token = JWTHandler.create_access_token(user_id=1, username="alice", role=UserRole.USER)
    payload = JWTHandler.validate_access_token(token)
"""

from portfolio_tracker.services.auth.password import PasswordService
from portfolio_tracker.services.auth.jwt_handler import JWTHandler
from portfolio_tracker.services.auth.service import AuthService, IssuedToken

__all__ = [
    "PasswordService",
    "JWTHandler",
    "AuthService",
    "IssuedToken",
]
