"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- auth: Back-office sign-in
- categories: Category listing and CRUD
- products: Catalog browsing and product CRUD
- variants: Variant CRUD, reorder, duplicate purge
- imports: Spreadsheet bulk import jobs

==============================================================================
"""

from . import health, auth, categories, products, variants, imports

__all__ = ["health", "auth", "categories", "products", "variants", "imports"]
