"""
==============================================================================
Category Endpoints
==============================================================================

Public category listing and back-office category CRUD.

==============================================================================
"""

from fastapi import APIRouter, Depends

from storefront.db.models import User
from storefront.core.dependencies import require_admin
from storefront.services.category_service import CategoryService
from storefront.store import RemoteStore, get_store
from storefront.schemas.catalog import (
    CategoryCreate,
    CategoryDetail,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from storefront.schemas.common import MessageResponse


router = APIRouter(prefix="/categories", tags=["Categories"])


class CategoryController:
    """Controller for category operations."""

    def __init__(self, store: RemoteStore):
        self._service = CategoryService(store)

    def list_all(self) -> CategoryListResponse:
        categories = self._service.list_categories()
        return CategoryListResponse(
            categories=[CategoryDetail.model_validate(c) for c in categories],
            total=len(categories)
        )

    def get(self, category_id: str) -> CategoryResponse:
        category = self._service.get_category(category_id)
        return CategoryResponse(category=CategoryDetail.model_validate(category))

    def create(self, data: CategoryCreate) -> CategoryResponse:
        category = self._service.create_category(data)
        return CategoryResponse(category=CategoryDetail.model_validate(category))

    def update(self, category_id: str, data: CategoryUpdate) -> CategoryResponse:
        category = self._service.update_category(category_id, data)
        return CategoryResponse(category=CategoryDetail.model_validate(category))

    def delete(self, category_id: str) -> MessageResponse:
        category = self._service.delete_category(category_id)
        return MessageResponse(message=f"Category '{category['name']}' deleted")


@router.get("", response_model=CategoryListResponse)
async def list_categories(store: RemoteStore = Depends(get_store)):
    """List all categories."""
    controller = CategoryController(store)
    return controller.list_all()


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, store: RemoteStore = Depends(get_store)):
    """Get category by ID."""
    controller = CategoryController(store)
    return controller.get(category_id)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    request: CategoryCreate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Create a category (Admin only)."""
    controller = CategoryController(store)
    return controller.create(request)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    request: CategoryUpdate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Update a category (Admin only)."""
    controller = CategoryController(store)
    return controller.update(category_id, request)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Delete a category no product uses (Admin only)."""
    controller = CategoryController(store)
    return controller.delete(category_id)
