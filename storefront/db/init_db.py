"""
==============================================================================
Database Initialization Module
==============================================================================

Creates the catalog tables and the default back-office account.

Initialization Flow:
-------------------
1. Create all tables from ORM models
2. Create the default admin account if no account exists
3. Verify the connection

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from storefront.config import get_settings
from storefront.core.security import get_security_manager
from storefront.db.database import DatabaseManager
from storefront.db.models import User


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database initialization manager.

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or DatabaseManager()
        self._security = get_security_manager()
        self._settings = get_settings()

    def create_tables(self) -> None:
        """Create all database tables (idempotent)."""
        logger.info("Creating database tables...")
        self._db_manager.create_tables()
        logger.info("✅ Database tables created successfully")

    def create_default_admin(self) -> Optional[User]:
        """
        Create the default admin account if no account exists yet.

        Credentials come from DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD.

        Returns:
            Created User, or None if an account already exists
        """
        with self._db_manager.session_scope() as session:
            existing = session.query(User).first()
            if existing:
                logger.info(f"Back-office account already exists: {existing.email}")
                return None

            admin = User(
                email=self._settings.default_admin_email,
                password_hash=self._security.hash_password(
                    self._settings.default_admin_password
                ),
                is_active=True,
            )
            session.add(admin)

        logger.info(f"✅ Default admin account created: {admin.email}")
        logger.warning("⚠️ Please change the default admin password immediately!")
        return admin

    def initialize(self) -> None:
        """Create tables, seed the default admin and verify the connection."""
        logger.info("Initializing database...")

        self.create_tables()

        if self._settings.create_default_admin:
            self.create_default_admin()

        if self._db_manager.verify_connection():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")


def init_db() -> None:
    """Initialize the database at application startup."""
    DatabaseInitializer().initialize()
