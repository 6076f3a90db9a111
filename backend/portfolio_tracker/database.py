# backend/portfolio_tracker/database.py
"""
Database connection and session management.

This module configures SQLAlchemy with:
- StaticPool for SQLite (single shared connection, used by tests)
- QueuePool for PostgreSQL with settings from DB_POOL_*
- A readiness probe used by /health/ready
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from .config import settings

logger = logging.getLogger(__name__)


def _create_engine() -> Engine:
    """
    Create SQLAlchemy engine with environment-appropriate configuration.

    - SQLite: StaticPool so an in-memory database is shared across sessions
    - PostgreSQL: QueuePool with configurable pool sizing and recycling
    """
    if settings.is_sqlite:
        # check_same_thread=False: FastAPI runs sync endpoints in a threadpool
        logger.info("Configuring SQLite database")
        return create_engine(
            settings.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    logger.info(
        f"Configuring PostgreSQL database pool: "
        f"size={settings.db_pool_size}, "
        f"max_overflow={settings.db_pool_max_overflow}, "
        f"recycle={settings.db_pool_recycle}s, "
        f"pre_ping={settings.db_pool_pre_ping}"
    )

    return create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_timeout=30,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Yields:
        Session: A SQLAlchemy session closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_health(bind: Engine | None = None) -> dict:
    """
    Check database connectivity and pool status.

    Args:
        bind: Engine to probe (defaults to the application engine)

    Returns:
        dict with "status" of "healthy" or "unhealthy"
    """
    target = bind or engine
    try:
        with target.connect() as conn:
            conn.execute(text("SELECT 1"))

        result = {
            "status": "healthy",
            "database": "sqlite" if target.dialect.name == "sqlite" else "postgresql",
        }
        if isinstance(target.pool, QueuePool):
            result["pool"] = {
                "pool_size": target.pool.size(),
                "checked_in": target.pool.checkedin(),
                "checked_out": target.pool.checkedout(),
                "overflow": target.pool.overflow(),
            }
        return result
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
        }
