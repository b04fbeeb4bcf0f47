"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: Shared response schemas
- Auth: Sign-in schemas
- Catalog: Category, product and variant schemas
- Imports: Import job schemas

==============================================================================
"""

from .common import SuccessResponse, MessageResponse
from .auth import (
    LoginRequest,
    TokenResponse,
    RefreshRequest,
    CurrentUserInfo,
    CurrentUserResponse,
    UserInfo,
)
from .catalog import (
    CategoryBrief,
    CategoryCreate,
    CategoryDetail,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    DuplicateCleanupResponse,
    ProductCountResponse,
    ProductCreate,
    ProductDetailResponse,
    ProductInfo,
    ProductListItem,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    ReorderResponse,
    VariantCreate,
    VariantDetail,
    VariantOrderRequest,
    VariantResponse,
    VariantUpdate,
)
from .imports import ImportJobInfo, ImportJobResponse

__all__ = [
    # Common
    "SuccessResponse",
    "MessageResponse",
    # Auth
    "LoginRequest",
    "TokenResponse",
    "RefreshRequest",
    "CurrentUserInfo",
    "CurrentUserResponse",
    "UserInfo",
    # Catalog
    "CategoryBrief",
    "CategoryCreate",
    "CategoryDetail",
    "CategoryListResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "DuplicateCleanupResponse",
    "ProductCountResponse",
    "ProductCreate",
    "ProductDetailResponse",
    "ProductInfo",
    "ProductListItem",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdate",
    "ReorderResponse",
    "VariantCreate",
    "VariantDetail",
    "VariantOrderRequest",
    "VariantResponse",
    "VariantUpdate",
    # Imports
    "ImportJobInfo",
    "ImportJobResponse",
]
