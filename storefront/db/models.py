"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the storefront catalog.

Database Schema:
---------------

    ┌──────────────────────────────────────────────┐
    │                 categories                   │
    ├──────────────────────────────────────────────┤
    │ id (UUID, PK)                                │
    │ name (VARCHAR, UNIQUE, NOT NULL)             │
    │ description (TEXT, NULLABLE)                 │
    │ created_at (DATETIME)                        │
    └──────────────────────────────────────────────┘
                          │
                          │ 1:N (RESTRICT on delete)
                          ▼
    ┌──────────────────────────────────────────────┐
    │                  products                    │
    ├──────────────────────────────────────────────┤
    │ id (UUID, PK)                                │
    │ name (VARCHAR, NOT NULL, INDEX)              │
    │ description (TEXT, NULLABLE)                 │
    │ category_id (UUID, FK → categories.id)       │
    │ image_url (VARCHAR, NULLABLE)                │
    │ price (FLOAT, NULLABLE)                      │
    │ created_at (DATETIME)                        │
    └──────────────────────────────────────────────┘
                          │
                          │ 1:N
                          ▼
    ┌──────────────────────────────────────────────┐
    │                  variants                    │
    ├──────────────────────────────────────────────┤
    │ id (UUID, PK)                                │
    │ product_id (UUID, FK → products.id)          │
    │ name (VARCHAR, NOT NULL)                     │
    │ image_url (VARCHAR, NULLABLE)                │
    │ price (FLOAT, NULLABLE)                      │
    │ stock (INTEGER, NULLABLE)                    │
    │ position (INTEGER, NULLABLE)                 │
    │ created_at (DATETIME)                        │
    └──────────────────────────────────────────────┘

The variants table deliberately carries no unique constraint on
(product_id, name, image_url): duplicates can and do get written by
repeated imports, and are collapsed on read or purged on demand.

    ┌──────────────────────────────────────────────┐
    │                    users                     │
    ├──────────────────────────────────────────────┤
    │ id (UUID, PK)                                │
    │ email (VARCHAR, UNIQUE, NOT NULL)            │
    │ password_hash (VARCHAR, NOT NULL)            │
    │ is_active (BOOLEAN, DEFAULT true)            │
    │ created_at / updated_at (DATETIME)           │
    └──────────────────────────────────────────────┘

=============================================================================
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, relationship

from storefront.db.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# CATALOG MODELS
# =============================================================================

class Category(Base):
    """Product category."""

    __tablename__ = "categories"

    id: str = Column(String(36), primary_key=True, default=_new_id)

    name: str = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Category display name (exact-match lookup key for imports)"
    )

    description: Optional[str] = Column(Text, nullable=True)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="category",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"Category(id={self.id!r}, name={self.name!r})"


class Product(Base):
    """
    Catalog product.

    A product belongs to at most one category and owns zero or more
    variants. Variants are deleted explicitly before the product; the
    foreign key has no cascade.
    """

    __tablename__ = "products"

    id: str = Column(String(36), primary_key=True, default=_new_id)

    name: str = Column(String(255), nullable=False, index=True)

    description: Optional[str] = Column(Text, nullable=True)

    category_id: Optional[str] = Column(
        String(36),
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )

    image_url: Optional[str] = Column(String(2048), nullable=True)

    price: Optional[float] = Column(Float, nullable=True)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    category: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="products",
    )

    variants: Mapped[List["Variant"]] = relationship(
        "Variant",
        back_populates="product",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"Product(id={self.id!r}, name={self.name!r})"


class Variant(Base):
    """
    Product variant.

    Attributes:
        name: Variant label shown in the picker
        image_url: Optional image replacing the product image when selected
        price: Optional price adjustment
        stock: Optional stock count
        position: Optional explicit order rank (zero-based)
    """

    __tablename__ = "variants"

    id: str = Column(String(36), primary_key=True, default=_new_id)

    product_id: str = Column(
        String(36),
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )

    name: str = Column(String(255), nullable=False)

    image_url: Optional[str] = Column(String(2048), nullable=True)

    price: Optional[float] = Column(Float, nullable=True)

    stock: Optional[int] = Column(Integer, nullable=True)

    position: Optional[int] = Column(Integer, nullable=True)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        return (
            f"Variant(id={self.id!r}, product_id={self.product_id!r}, "
            f"name={self.name!r}, position={self.position!r})"
        )


# =============================================================================
# BACK-OFFICE ACCOUNTS
# =============================================================================

class User(Base):
    """
    Back-office account.

    Every active account may use the admin endpoints; there are no finer
    roles in the storefront.
    """

    __tablename__ = "users"

    id: str = Column(String(36), primary_key=True, default=_new_id)

    email: str = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Login email (lowercase)"
    )

    password_hash: str = Column(String(255), nullable=False)

    is_active: bool = Column(Boolean, default=True, nullable=False)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    updated_at: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, is_active={self.is_active})"

    def __str__(self) -> str:
        return self.email
