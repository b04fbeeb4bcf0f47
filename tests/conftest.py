"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, store, client, authentication and catalog
fixtures.

The database is a temporary SQLite file rather than an in-memory one:
store calls each open their own session, and reorder writes run on
worker threads, so every connection must see the same data.

==============================================================================
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'catalog.db')}"
os.environ["CREATE_DEFAULT_ADMIN"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-not-for-production"

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from storefront.main import app
from storefront.db.database import DatabaseManager, get_database_manager
from storefront.db.models import User
from storefront.core.security import get_security_manager
from storefront.services.import_service import get_import_registry
from storefront.store import RemoteStore


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def db_manager() -> Generator[DatabaseManager, None, None]:
    """Create fresh tables for each test."""
    manager = get_database_manager()
    manager.create_tables()
    try:
        yield manager
    finally:
        manager.drop_tables()


@pytest.fixture(scope="function")
def db(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    """Plain session for seeding accounts."""
    session = db_manager.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def store(db_manager: DatabaseManager) -> RemoteStore:
    """Remote store client bound to the test database."""
    return RemoteStore()


@pytest.fixture(scope="function")
def client(db_manager: DatabaseManager) -> Generator[TestClient, None, None]:
    """Create test client."""
    get_import_registry().clear()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_import_registry().clear()


# ============================================================================
# ACCOUNT FIXTURES
# ============================================================================

@pytest.fixture
def admin_user(db: Session) -> User:
    """Create a back-office account in the test database."""
    security = get_security_manager()
    user = User(
        email="admin@example.com",
        password_hash=security.hash_password("admin123"),
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def disabled_user(db: Session) -> User:
    """Create a disabled back-office account."""
    security = get_security_manager()
    user = User(
        email="former@example.com",
        password_hash=security.hash_password("former123"),
        is_active=False
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ============================================================================
# TOKEN FIXTURES
# ============================================================================

@pytest.fixture
def admin_token(admin_user: User) -> str:
    """Create access token for the admin account."""
    security = get_security_manager()
    return security.create_access_token({
        "sub": admin_user.id,
        "email": admin_user.email
    })


@pytest.fixture
def admin_headers(admin_token: str) -> Dict[str, str]:
    """Authorization headers for the admin account."""
    return {"Authorization": f"Bearer {admin_token}"}


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def catalog(store: RemoteStore) -> Dict[str, str]:
    """
    Seed two categories, three products and the shirt's variants.

    The shirt carries one duplicate variant (second "Red"), so it has four
    stored rows and three distinct variants.
    """
    tops, shoes = store.insert("categories", [
        {"name": "Tops", "description": "Shirts and sweaters"},
        {"name": "Shoes"},
    ])

    shirt, runner, sweater = store.insert("products", [
        {
            "name": "Linen Shirt",
            "description": "Breathable summer shirt",
            "category_id": tops["id"],
            "image_url": "https://img.example.com/shirt.jpg",
            "price": 39.0,
        },
        {
            "name": "Trail Runner",
            "description": "Grippy sole",
            "category_id": shoes["id"],
            "price": 89.0,
        },
        {
            "name": "Wool Sweater",
            "category_id": tops["id"],
            "price": 59.0,
        },
    ])

    red, blue, red_again, green = store.insert("variants", [
        {"product_id": shirt["id"], "name": "Red", "image_url": "https://img.example.com/red.jpg"},
        {"product_id": shirt["id"], "name": "Blue", "image_url": "https://img.example.com/blue.jpg"},
        {"product_id": shirt["id"], "name": "Red", "image_url": "https://img.example.com/red.jpg"},
        {"product_id": shirt["id"], "name": "Émeraude", "image_url": None},
    ])

    return {
        "tops": tops["id"],
        "shoes": shoes["id"],
        "shirt": shirt["id"],
        "runner": runner["id"],
        "sweater": sweater["id"],
        "red": red["id"],
        "blue": blue["id"],
        "red_duplicate": red_again["id"],
        "green": green["id"],
    }
