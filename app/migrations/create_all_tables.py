"""
Migration script to create all database tables and the default accounts

Run this script to bootstrap a database:
    python -m app.migrations.create_all_tables

Seeding is idempotent: accounts whose email already exists are left alone.
"""

import os
import logging
from typing import List

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from app.database import engine, Base, get_db_session
# Import all models to ensure they're registered with Base
from app.models import User, UserRole, Movie, Review, Watchlist  # noqa: F401
from app.services.auth_service import AuthService

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = (
    # (env prefix, default email, default password, name, role)
    ("SEED_ADMIN", "admin@moviedb.com", "admin123", "Admin", UserRole.ADMIN),
    ("SEED_USER", "user@moviedb.com", "user123", "Demo User", UserRole.USER),
)


def create_tables():
    """Create all database tables"""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def seed_default_users(db: Session) -> List[User]:
    """Create the default admin and demo user if missing; returns the ones created"""
    created = []
    for prefix, default_email, default_password, name, role in DEFAULT_ACCOUNTS:
        email = os.getenv(f"{prefix}_EMAIL", default_email).lower()
        password = os.getenv(f"{prefix}_PASSWORD", default_password)

        if db.query(User).filter(User.email == email).first():
            logger.info(f"Seed account exists, skipping: {email}")
            continue

        created.append(AuthService.create_user(db, email, password, name, role=role))
        logger.info(f"Seed account created: {email} ({role.value})")
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    create_tables()
    session = get_db_session()
    try:
        seed_default_users(session)
    finally:
        session.close()
