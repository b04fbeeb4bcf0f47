"""
==============================================================================
Variant Service Module
==============================================================================

Variant CRUD over the remote store.

Writes are not de-duplicated: creating a variant identical to an existing
one (same product, name and image) stores a second row, which listings
collapse and the duplicate cleanup purges.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from storefront.core import exceptions
from storefront.schemas.catalog import VariantCreate, VariantUpdate
from storefront.store import RemoteStore, StoreError

from .store_errors import translate_store_error


# Module logger
logger = logging.getLogger(__name__)


class VariantService:
    """
    Variant management.

    Example:
        >>> service = VariantService(RemoteStore())
        >>> variant = service.create_variant(VariantCreate(product_id=pid, name="XL"))
    """

    def __init__(self, store: RemoteStore) -> None:
        self._store = store

    def get_variant(self, variant_id: str) -> Dict[str, Any]:
        try:
            return self._store.fetch_one("variants", variant_id)
        except StoreError as e:
            raise translate_store_error(e, exceptions.variant_not_found(variant_id)) from e

    def create_variant(self, data: VariantCreate) -> Dict[str, Any]:
        """
        Raises:
            AppException: PRODUCT_NOT_FOUND if the parent product is missing
        """
        try:
            self._store.fetch_one("products", data.product_id)
            variant = self._store.insert("variants", [data.model_dump()])[0]
        except StoreError as e:
            raise translate_store_error(e, exceptions.product_not_found(data.product_id)) from e

        logger.info(f"✅ Variant created: {variant['name']} (product {variant['product_id']})")
        return variant

    def update_variant(self, variant_id: str, data: VariantUpdate) -> Dict[str, Any]:
        fields = data.model_dump(exclude_unset=True)
        if "name" in fields and fields["name"] is None:
            fields.pop("name")

        try:
            variant = self._store.update("variants", variant_id, fields)
        except StoreError as e:
            raise translate_store_error(e, exceptions.variant_not_found(variant_id)) from e

        logger.info(f"✏️ Variant updated: {variant['name']}")
        return variant

    def delete_variant(self, variant_id: str) -> Dict[str, Any]:
        variant = self.get_variant(variant_id)

        try:
            self._store.delete("variants", variant_id)
        except StoreError as e:
            raise translate_store_error(e) from e

        logger.info(f"🗑️ Variant deleted: {variant['name']}")
        return variant
