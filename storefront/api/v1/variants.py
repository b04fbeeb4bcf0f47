"""
==============================================================================
Variant Endpoints
==============================================================================

Variant CRUD, reordering and the duplicate purge.

Reorder:
-------
    PUT /variants/order  {"variant_ids": ["c", "a", "b"]}

All ids must belong to one product. The listed variants move to the
front and the product's other visible variants follow in their current
order; the response carries the whole list in its new order.

Ranks are written concurrently. If some writes fail the response is
REORDER_FAILED (502) and its details list which variants were updated
and which failed; the updated ones are not rolled back.

==============================================================================
"""

from fastapi import APIRouter, Depends

from storefront.catalog import VariantSelection
from storefront.db.models import User
from storefront.core import exceptions
from storefront.core.dependencies import require_admin
from storefront.services.cleanup_service import CleanupService
from storefront.services.reorder_service import ReorderService
from storefront.services.variant_service import VariantService
from storefront.store import RemoteStore, get_store
from storefront.schemas.catalog import (
    DuplicateCleanupResponse,
    ReorderResponse,
    VariantCreate,
    VariantDetail,
    VariantOrderRequest,
    VariantResponse,
    VariantUpdate,
)
from storefront.schemas.common import MessageResponse


router = APIRouter(prefix="/variants", tags=["Variants"])


class VariantController:
    """Controller for variant operations."""

    def __init__(self, store: RemoteStore):
        self._store = store
        self._service = VariantService(store)

    def get(self, variant_id: str) -> VariantResponse:
        variant = self._service.get_variant(variant_id)
        return VariantResponse(variant=VariantDetail.model_validate(variant))

    def create(self, data: VariantCreate) -> VariantResponse:
        variant = self._service.create_variant(data)
        return VariantResponse(variant=VariantDetail.model_validate(variant))

    def update(self, variant_id: str, data: VariantUpdate) -> VariantResponse:
        variant = self._service.update_variant(variant_id, data)
        return VariantResponse(variant=VariantDetail.model_validate(variant))

    def delete(self, variant_id: str) -> MessageResponse:
        variant = self._service.delete_variant(variant_id)
        return MessageResponse(message=f"Variant '{variant['name']}' deleted")

    async def reorder(self, data: VariantOrderRequest) -> ReorderResponse:
        service = ReorderService(self._store)
        selection = VariantSelection(
            await service.product_variants(data.variant_ids),
            reorderer=service.reorder_variants
        )
        result = await selection.reorder(data.variant_ids)

        if not result.success:
            raise exceptions.reorder_failed(
                result.updated, result.failed, result.partially_applied
            )

        return ReorderResponse(
            ranks=result.ranks,
            updated=result.updated,
            unchanged=result.unchanged,
            variants=[
                VariantDetail.model_validate({**variant, "position": result.ranks[variant["id"]]})
                for variant in selection.variants
            ]
        )

    def remove_duplicates(self) -> DuplicateCleanupResponse:
        report = CleanupService(self._store).remove_duplicate_variants()
        return DuplicateCleanupResponse(**report.model_dump())


@router.put("/order", response_model=ReorderResponse)
async def reorder_variants(
    request: VariantOrderRequest,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Persist a new variant order (Admin only)."""
    controller = VariantController(store)
    return await controller.reorder(request)


@router.post("/remove-duplicates", response_model=DuplicateCleanupResponse)
async def remove_duplicate_variants(
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Delete duplicate variant rows from the store (Admin only)."""
    controller = VariantController(store)
    return controller.remove_duplicates()


@router.get("/{variant_id}", response_model=VariantResponse)
async def get_variant(variant_id: str, store: RemoteStore = Depends(get_store)):
    """Get variant by ID."""
    controller = VariantController(store)
    return controller.get(variant_id)


@router.post("", response_model=VariantResponse, status_code=201)
async def create_variant(
    request: VariantCreate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Create a variant (Admin only)."""
    controller = VariantController(store)
    return controller.create(request)


@router.put("/{variant_id}", response_model=VariantResponse)
async def update_variant(
    variant_id: str,
    request: VariantUpdate,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Update a variant (Admin only)."""
    controller = VariantController(store)
    return controller.update(variant_id, request)


@router.delete("/{variant_id}", response_model=MessageResponse)
async def delete_variant(
    variant_id: str,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Delete a variant (Admin only)."""
    controller = VariantController(store)
    return controller.delete(variant_id)
