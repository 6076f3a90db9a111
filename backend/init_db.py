#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py

Asset writes require an admin; create (or promote) one on a fresh install:
    python backend/init_db.py --admin-username admin --admin-password secret123
"""
import argparse
import sys
from pathlib import Path

# Add the backend directory to Python path so 'portfolio_tracker' is importable
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import select

from portfolio_tracker.database import SessionLocal, engine
from portfolio_tracker.models import Base, User, UserRole
from portfolio_tracker.services.auth import AuthService


def init_db() -> None:
    """Create all database tables defined in models."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def ensure_admin(username: str, password: str) -> None:
    """Register `username` as an admin, or promote it if it already exists."""
    auth_service = AuthService()
    db = SessionLocal()
    try:
        user = db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

        if user is None:
            auth_service.register(db, username, password, role=UserRole.ADMIN)
            print(f"Admin user '{username}' created.")
        elif user.role != UserRole.ADMIN:
            auth_service.set_role(db, user.id, UserRole.ADMIN)
            print(f"User '{username}' promoted to admin.")
        else:
            print(f"Admin user '{username}' already exists.")
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and optionally an admin user")
    parser.add_argument("--admin-username")
    parser.add_argument("--admin-password")
    args = parser.parse_args()

    init_db()

    if args.admin_username:
        if not args.admin_password:
            parser.error("--admin-password is required with --admin-username")
        ensure_admin(args.admin_username, args.admin_password)


if __name__ == "__main__":
    main()
