"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Catalog browsing (public) and product CRUD (back office).

Listing cards show the first few de-duplicated variants plus a
"more_variants" count; the detail view returns every de-duplicated
variant, optionally ordered by name or rank, with the selection resolved
from ``variant_id``.

==============================================================================
"""

from typing import Any, Dict, Literal, Optional
from fastapi import APIRouter, Depends, Query

from storefront.catalog import VariantSelection
from storefront.config import get_settings
from storefront.db.models import User
from storefront.core.dependencies import require_admin
from storefront.services.product_service import ProductService
from storefront.store import RemoteStore, get_store
from storefront.schemas.catalog import (
    ProductCountResponse,
    ProductCreate,
    ProductDetailResponse,
    ProductInfo,
    ProductListItem,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from storefront.schemas.common import MessageResponse


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, store: RemoteStore):
        self._settings = get_settings()
        self._service = ProductService(store, self._settings)

    def _list_item(self, product: Dict[str, Any]) -> ProductListItem:
        preview = self._settings.variant_preview_count
        selection = VariantSelection(product.get("variants") or [])
        fields = {key: value for key, value in product.items() if key != "variants"}

        return ProductListItem(
            **fields,
            variant_count=len(selection),
            variants_preview=selection.visible(preview),
            more_variants=selection.hidden_count(preview),
        )

    def list_products(
        self,
        query: Optional[str],
        category: Optional[str],
        page: int,
        page_size: Optional[int]
    ) -> ProductListResponse:
        result = self._service.list_products(query, category, page, page_size)
        return ProductListResponse(
            items=[self._list_item(p) for p in result.items],
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            pages=result.total_pages
        )

    def count(self) -> ProductCountResponse:
        return ProductCountResponse(count=self._service.count_products())

    def get_detail(
        self,
        product_id: str,
        order: Optional[str],
        variant_id: Optional[str]
    ) -> ProductDetailResponse:
        detail = self._service.get_product_detail(product_id, order=order, variant_id=variant_id)
        return ProductDetailResponse(
            product=ProductInfo.model_validate(detail.product),
            variants=detail.variants,
            selected_variant=detail.selected_variant,
            display_image=detail.display_image,
            more_variants=detail.hidden_variant_count
        )

    def create(self, data: ProductCreate) -> ProductResponse:
        product = self._service.create_product(data)
        return ProductResponse(product=ProductInfo.model_validate(product))

    def update(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        product = self._service.update_product(product_id, data)
        return ProductResponse(product=ProductInfo.model_validate(product))

    def delete(self, product_id: str) -> MessageResponse:
        product = self._service.delete_product(product_id)
        return MessageResponse(message=f"Product '{product['name']}' deleted")


@router.get("", response_model=ProductListResponse)
async def list_products(
    q: Optional[str] = Query(None, description="Search in name and description"),
    category: Optional[str] = Query(None, description="Category name, or 'all'"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    store: RemoteStore = Depends(get_store)
):
    """Browse the catalog with search, category filter and pagination."""
    controller = ProductController(store)
    return controller.list_products(q, category, page, page_size)


@router.get("/count", response_model=ProductCountResponse)
async def count_products(
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Total product count for the back office (null if unavailable)."""
    controller = ProductController(store)
    return controller.count()


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    product_id: str,
    order: Optional[Literal["name", "rank"]] = Query(None, description="Variant order"),
    variant_id: Optional[str] = Query(None, description="Selected variant"),
    store: RemoteStore = Depends(get_store)
):
    """Product detail with de-duplicated variants."""
    controller = ProductController(store)
    return controller.get_detail(product_id, order, variant_id)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    request: ProductCreate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Create a product (Admin only)."""
    controller = ProductController(store)
    return controller.create(request)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: ProductUpdate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Update a product (Admin only)."""
    controller = ProductController(store)
    return controller.update(product_id, request)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Delete a product and its variants (Admin only)."""
    controller = ProductController(store)
    return controller.delete(product_id)
