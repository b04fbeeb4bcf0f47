"""
==============================================================================
Catalog Schemas Module
==============================================================================

Request and response schemas for categories, products and variants.

Update schemas carry only the fields the client sent
(``model_dump(exclude_unset=True)``), so a PUT is a partial update.

==============================================================================
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Value cannot be blank")
    return v


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# =============================================================================
# CATEGORY SCHEMAS
# =============================================================================

class CategoryCreate(BaseModel):
    """Category creation request."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("description")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class CategoryUpdate(BaseModel):
    """Category update request."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else None

    @field_validator("description")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class CategoryBrief(BaseModel):
    """Category embedded in a product."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class CategoryDetail(CategoryBrief):
    """Full category row."""
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryResponse(BaseModel):
    """Single category response."""
    success: bool = Field(default=True)
    category: CategoryDetail


class CategoryListResponse(BaseModel):
    """All categories."""
    success: bool = Field(default=True)
    categories: List[CategoryDetail]
    total: int


# =============================================================================
# VARIANT SCHEMAS
# =============================================================================

class VariantCreate(BaseModel):
    """Variant creation request."""
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    price: Optional[float] = Field(default=None)
    stock: Optional[int] = Field(default=None, ge=0)
    position: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("image_url")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class VariantUpdate(BaseModel):
    """Variant update request."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    price: Optional[float] = Field(default=None)
    stock: Optional[int] = Field(default=None, ge=0)
    position: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else None

    @field_validator("image_url")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class VariantDetail(BaseModel):
    """Variant row."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    name: str
    image_url: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    position: Optional[int] = None
    created_at: Optional[datetime] = None


class VariantResponse(BaseModel):
    """Single variant response."""
    success: bool = Field(default=True)
    variant: VariantDetail


class VariantOrderRequest(BaseModel):
    """New display order for a set of variants (first id gets rank 0)."""
    variant_ids: List[str] = Field(..., min_length=1)


class ReorderResponse(BaseModel):
    """Reorder outcome."""
    success: bool = Field(default=True)
    ranks: Dict[str, int]
    updated: List[str]
    unchanged: List[str]
    variants: List[VariantDetail] = Field(default_factory=list)


class DuplicateCleanupResponse(BaseModel):
    """Outcome of a store-wide duplicate variant purge."""
    success: bool = Field(default=True)
    scanned: int
    duplicates_found: int
    deleted: int
    failed: List[str]


# =============================================================================
# PRODUCT SCHEMAS
# =============================================================================

class ProductCreate(BaseModel):
    """Product creation request."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    category_id: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("description", "image_url", "category_id")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class ProductUpdate(BaseModel):
    """Product update request."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    category_id: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else None

    @field_validator("description", "image_url", "category_id")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class ProductInfo(BaseModel):
    """Product row with its category."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = None
    created_at: Optional[datetime] = None
    category: Optional[CategoryBrief] = None


class ProductListItem(ProductInfo):
    """Catalog card: product plus a short variant preview."""
    variant_count: int = 0
    variants_preview: List[VariantDetail] = Field(default_factory=list)
    more_variants: int = 0


class ProductListResponse(BaseModel):
    """Filtered, paginated catalog listing."""
    success: bool = Field(default=True)
    items: List[ProductListItem]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    pages: int = Field(ge=0)


class ProductResponse(BaseModel):
    """Single product response."""
    success: bool = Field(default=True)
    product: ProductInfo


class ProductDetailResponse(BaseModel):
    """Product page: de-duplicated variants and the current selection."""
    success: bool = Field(default=True)
    product: ProductInfo
    variants: List[VariantDetail]
    selected_variant: Optional[VariantDetail] = None
    display_image: str
    more_variants: int = 0


class ProductCountResponse(BaseModel):
    """Product count; null when the store could not be reached."""
    success: bool = Field(default=True)
    count: Optional[int] = None
