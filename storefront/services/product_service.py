"""
==============================================================================
Product Service Module
==============================================================================

Catalog browsing and product CRUD over the remote store.

Delete Flow:
-----------
    1. Confirm the product exists          → PRODUCT_NOT_FOUND
    2. Delete all variants of the product  (one request)
    3. Delete the product                  (one request)

The two deletes are separate requests; if the second fails the variants
are already gone and the error is reported as STORE_ERROR.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from storefront.catalog import CatalogBrowser, CatalogPage, ProductDetail
from storefront.config import Settings, get_settings
from storefront.core import exceptions
from storefront.schemas.catalog import ProductCreate, ProductUpdate
from storefront.store import RemoteStore, StoreError

from .store_errors import translate_store_error


# Module logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Product listing, detail and CRUD.

    Attributes:
        _store: Remote store client
        _browser: Catalog browser over the same store

    Example:
        >>> service = ProductService(RemoteStore())
        >>> page = service.list_products(query="tee", category="all", page=1)
        >>> detail = service.get_product_detail(product_id, order="name")
    """

    def __init__(self, store: RemoteStore, settings: Optional[Settings] = None) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._browser = CatalogBrowser(store, self._settings)

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> CatalogPage:
        try:
            return self._browser.list_products(query, category, page, page_size)
        except StoreError as e:
            raise translate_store_error(e) from e

    def count_products(self) -> Optional[int]:
        """
        Total number of products, or None if the store call fails.

        Used for the back-office badge; a failure is logged and not raised.
        """
        try:
            return self._store.count("products")
        except StoreError as e:
            logger.error(f"Error fetching product count: {e.message}")
            return None

    def get_product(self, product_id: str) -> Dict[str, Any]:
        try:
            return self._store.fetch_one("products", product_id, embed=("category",))
        except StoreError as e:
            raise translate_store_error(e, exceptions.product_not_found(product_id)) from e

    def get_product_detail(
        self,
        product_id: str,
        order: Optional[str] = None,
        variant_id: Optional[str] = None,
    ) -> ProductDetail:
        try:
            return self._browser.get_product(product_id, order=order, variant_id=variant_id)
        except StoreError as e:
            raise translate_store_error(e, exceptions.product_not_found(product_id)) from e
        except ValueError as e:
            raise exceptions.validation_error(str(e)) from e

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def _check_category(self, category_id: Optional[str]) -> None:
        if category_id is None:
            return
        try:
            self._store.fetch_one("categories", category_id)
        except StoreError as e:
            raise translate_store_error(e, exceptions.category_not_found(category_id)) from e

    def create_product(self, data: ProductCreate) -> Dict[str, Any]:
        self._check_category(data.category_id)

        try:
            created = self._store.insert("products", [data.model_dump()])[0]
        except StoreError as e:
            raise translate_store_error(e) from e

        logger.info(f"✅ Product created: {created['name']}")
        return self.get_product(created["id"])

    def update_product(self, product_id: str, data: ProductUpdate) -> Dict[str, Any]:
        fields = data.model_dump(exclude_unset=True)
        if "name" in fields and fields["name"] is None:
            fields.pop("name")
        if fields.get("category_id"):
            self._check_category(fields["category_id"])

        try:
            self._store.update("products", product_id, fields)
        except StoreError as e:
            raise translate_store_error(e, exceptions.product_not_found(product_id)) from e

        product = self.get_product(product_id)
        logger.info(f"✏️ Product updated: {product['name']}")
        return product

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        """
        Delete a product and all of its variants.

        Returns:
            The deleted product row
        """
        product = self.get_product(product_id)

        try:
            removed = self._store.delete("variants", filters={"product_id": product_id})
            self._store.delete("products", product_id)
        except StoreError as e:
            raise translate_store_error(e) from e

        logger.info(f"🗑️ Product deleted: {product['name']} ({removed} variant(s))")
        return product
