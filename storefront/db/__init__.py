"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure and ORM models.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
├── models.py     - Category, Product, Variant, User
└── init_db.py    - DatabaseInitializer for setup

Application code does not query these models directly; it goes through
the remote store client in storefront.store. The auth service is the one
exception and works on User rows with a plain session.

==============================================================================
"""

from .database import Base, DatabaseManager, get_database_manager, get_db
from .models import Category, Product, User, Variant
from .init_db import DatabaseInitializer, init_db

__all__ = [
    "Base",
    "DatabaseManager",
    "get_database_manager",
    "get_db",
    "Category",
    "Product",
    "User",
    "Variant",
    "DatabaseInitializer",
    "init_db",
]
