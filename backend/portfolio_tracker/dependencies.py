# backend/portfolio_tracker/dependencies.py
"""
Dependency injection module for FastAPI services.

Singleton service instances are shared across all requests. Services are
lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from portfolio_tracker.dependencies import (
        get_valuation_service,
        get_current_user,
        require_admin,
    )

    @router.get("/{portfolio_id}/valuation")
    def get_valuation(
        portfolio_id: int,
        service: ValuationService = Depends(get_valuation_service),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from portfolio_tracker.config import settings
from portfolio_tracker.database import get_db
from portfolio_tracker.models import Portfolio, User, UserRole
from portfolio_tracker.services.auth import AuthService
from portfolio_tracker.services.exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
)
from portfolio_tracker.services.market_simulation import MarketSimulator
from portfolio_tracker.services.profit_logs import ProfitLogService
from portfolio_tracker.services.valuation.service import ValuationService

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT authentication
_bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================


@lru_cache(maxsize=1)
def get_valuation_service() -> ValuationService:
    """Get the singleton ValuationService (stateless calculators)."""
    logger.debug("Initializing singleton ValuationService")
    return ValuationService()


@lru_cache(maxsize=1)
def get_profit_log_service() -> ProfitLogService:
    logger.debug("Initializing singleton ProfitLogService")
    return ProfitLogService()


@lru_cache(maxsize=1)
def get_market_simulator() -> MarketSimulator:
    """
    Get the singleton MarketSimulator.

    Seeded from settings.market_simulation_seed when set, so a deployment
    can serve a reproducible feed.
    """
    logger.debug("Initializing singleton MarketSimulator")
    return MarketSimulator(seed=settings.market_simulation_seed)


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    logger.debug("Initializing singleton AuthService")
    return AuthService()


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """
    Dependency that resolves the bearer token to the current user.

    Raises:
        HTTPException 401: No token, invalid or expired token, unknown user,
            or a token replaced by a later login / cleared by logout
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        return auth_service.authenticate(db, credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidCredentialsError as e:
        raise _unauthorized(str(e))


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency for admin-only endpoints.

    Raises:
        HTTPException 403: If the current user is not an admin
    """
    if current_user.role != UserRole.ADMIN:
        logger.warning(f"User {current_user.id} denied admin-only operation")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return current_user


def get_portfolio_with_owner_check(
    portfolio_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> Portfolio:
    """
    Dependency that fetches a live portfolio and verifies ownership.

    Raises:
        HTTPException 404: If portfolio not found or soft-deleted
        HTTPException 403: If user doesn't own the portfolio
    """
    portfolio = db.get(Portfolio, portfolio_id)

    if portfolio is None or portfolio.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio {portfolio_id} not found",
        )

    if portfolio.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this portfolio",
        )

    return portfolio


# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

def clear_service_caches() -> None:
    """
    Drop all singleton instances; the next call creates fresh ones.

    Useful for testing.
    """
    get_valuation_service.cache_clear()
    get_profit_log_service.cache_clear()
    get_market_simulator.cache_clear()
    get_auth_service.cache_clear()
    logger.info("Cleared all service singleton caches")
