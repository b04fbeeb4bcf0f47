"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes between the API routers and the remote store.

This package provides:
- AuthService: Back-office sign-in and token refresh
- CategoryService / ProductService / VariantService: CRUD and browsing
- ReorderService: Concurrent variant rank writes
- CleanupService: Store-wide duplicate variant purge
- ImportService: Spreadsheet bulk import and import jobs

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business logic, StoreError → AppException
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  Remote Store   │  ← One request per call
    └─────────────────┘

==============================================================================
"""

from .auth_service import AuthService
from .category_service import CategoryService
from .product_service import ProductService
from .variant_service import VariantService
from .reorder_service import ReorderResult, ReorderService
from .cleanup_service import CleanupReport, CleanupService
from .import_service import (
    ImportJobRegistry,
    ImportService,
    ImportStatus,
    get_import_registry,
)

__all__ = [
    "AuthService",
    "CategoryService",
    "ProductService",
    "VariantService",
    "ReorderResult",
    "ReorderService",
    "CleanupReport",
    "CleanupService",
    "ImportJobRegistry",
    "ImportService",
    "ImportStatus",
    "get_import_registry",
]
