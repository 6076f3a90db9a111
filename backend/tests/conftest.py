# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- A TestClient wired to the test session
- Sample data factories and bearer token helpers
"""

import os

# Set required environment variables BEFORE importing portfolio_tracker modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_tracker.database import get_db
from portfolio_tracker.models import (
    Base,
    Asset,
    AssetType,
    Portfolio,
    PortfolioItem,
    ProfitLog,
    TradeType,
    User,
    UserRole,
)
from portfolio_tracker.services.auth.jwt_handler import JWTHandler


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Iterator[TestClient]:
    """Create TestClient with database dependency override."""
    from portfolio_tracker.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def create_user(
        db: Session,
        username: str = "alice",
        role: UserRole = UserRole.USER,
        hashed_password: str = "hashed_password",
) -> User:
    """Factory function for creating User entities in the database."""
    user = User(username=username, hashed_password=hashed_password, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_auth_headers(db: Session, user: User) -> dict[str, str]:
    """
    Issue a token for user the way login does (it must also be stored on
    the user) and return the Authorization header.
    """
    token = JWTHandler.create_access_token(user_id=user.id, username=user.username, role=user.role)
    user.token = token
    db.commit()
    return {"Authorization": f"Bearer {token}"}


def create_asset(
        db: Session,
        asset_code: str = "AAPL",
        asset_type: AssetType = AssetType.STOCK,
        price: str = "150.00",
        name: str | None = None,
        history: list[tuple[str, str]] | None = None,
        currency: str = "USD",
        is_deleted: bool = False,
) -> Asset:
    """
    Factory function for creating Asset entities in the database.

    history is a list of (ISO date, price) pairs, stored the way the API
    stores it: parallel lists of strings.
    """
    history = history or []
    asset = Asset(
        asset_code=asset_code,
        name=name or f"{asset_code} Inc.",
        asset_type=asset_type,
        price=Decimal(price),
        currency=currency,
        history_dates=[d for d, _ in history],
        history_prices=[p for _, p in history],
        is_deleted=is_deleted,
    )
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def create_portfolio(
        db: Session,
        user: User,
        name: str = "Main",
        is_deleted: bool = False,
) -> Portfolio:
    """Factory function for creating Portfolio entities in the database."""
    portfolio = Portfolio(user_id=user.id, name=name, is_deleted=is_deleted)
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    return portfolio


def create_item(
        db: Session,
        portfolio: Portfolio,
        asset_code: str = "AAPL",
        side: TradeType = TradeType.BUY,
        quantity: str = "10",
        amount: str = "1000",
        asset_type: AssetType = AssetType.STOCK,
        purchase_date: date = date(2024, 1, 15),
        is_deleted: bool = False,
) -> PortfolioItem:
    """Factory function for creating PortfolioItem entities in the database."""
    item = PortfolioItem(
        portfolio_id=portfolio.id,
        asset_code=asset_code,
        asset_type=asset_type,
        type=side,
        quantity=Decimal(quantity),
        amount=Decimal(amount),
        purchase_date=purchase_date,
        is_deleted=is_deleted,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def create_log(
        db: Session,
        item: PortfolioItem,
        log_date: date,
        value: str = "1000",
        profit: str = "0",
        is_deleted: bool = False,
) -> ProfitLog:
    """Factory function for creating ProfitLog entities in the database."""
    log = ProfitLog(
        item_id=item.id,
        date=log_date,
        value=Decimal(value),
        profit=Decimal(profit),
        is_deleted=is_deleted,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


# =============================================================================
# FIXTURE EXPORTS (for convenience in tests)
# =============================================================================

@pytest.fixture
def sample_user(db: Session) -> User:
    """Provide a sample User for tests."""
    return create_user(db)


@pytest.fixture
def sample_admin(db: Session) -> User:
    return create_user(db, username="admin", role=UserRole.ADMIN)


@pytest.fixture
def sample_portfolio(db: Session, sample_user: User) -> Portfolio:
    """Provide a sample Portfolio for tests."""
    return create_portfolio(db, sample_user)
