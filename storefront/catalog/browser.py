"""
==============================================================================
Catalog Browser Module
==============================================================================

Read side of the storefront catalog.

Listing:
-------
1. Fetch every product with its category and variants embedded
2. Collapse duplicate variants per product
3. Filter by category name ("all" or empty means no filter)
4. Filter by search term (case-insensitive, name or description)
5. Slice the requested page

Filtering and paging run in memory on the fetched snapshot, so the totals
always agree with the items returned.

Detail:
------
One product with de-duplicated variants, optionally sorted by name or by
rank, plus the selection resolved from a variant id.

==============================================================================
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from storefront.config import Settings, get_settings
from storefront.store import RemoteStore

from .models import CatalogPage, ProductDetail
from .selection import VariantSelection
from .variants import deduplicate_variants, sort_variants_by_name, sort_variants_by_rank


# Module logger
logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

VARIANT_ORDERS = ("name", "rank")


class CatalogBrowser:
    """
    Catalog listing and product detail over the remote store.

    Store failures propagate as StoreError; the service layer maps them.

    Example:
        >>> browser = CatalogBrowser(RemoteStore())
        >>> page = browser.list_products(query="shirt", category="Tops")
        >>> detail = browser.get_product(page.items[0]["id"], order="name")
    """

    def __init__(self, store: RemoteStore, settings: Optional[Settings] = None) -> None:
        self._store = store
        self._settings = settings or get_settings()

    # =========================================================================
    # FILTERS
    # =========================================================================

    @staticmethod
    def matches_category(product: Dict[str, Any], category: Optional[str]) -> bool:
        if not category or category == ALL_CATEGORIES:
            return True
        embedded = product.get("category")
        return embedded is not None and embedded.get("name") == category

    @staticmethod
    def matches_query(product: Dict[str, Any], query: Optional[str]) -> bool:
        term = (query or "").strip().lower()
        if not term:
            return True
        name = (product.get("name") or "").lower()
        description = (product.get("description") or "").lower()
        return term in name or term in description

    # =========================================================================
    # LISTING
    # =========================================================================

    def fetch_products(self) -> List[Dict[str, Any]]:
        """All products with embedded category and de-duplicated variants."""
        products = self._store.fetch("products", embed=("category", "variants"))

        for product in products:
            raw = product.get("variants") or []
            product["variants"] = deduplicate_variants(raw)
            if len(raw) != len(product["variants"]):
                logger.debug(
                    f"Collapsed {len(raw) - len(product['variants'])} duplicate "
                    f"variant(s) of product {product['id']}"
                )

        return products

    def list_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> CatalogPage:
        """
        Filtered, paginated catalog listing.

        Args:
            query: Search term matched against name and description
            category: Category name, or "all"
            page: 1-based page number
            page_size: Products per page (settings default when None)

        Returns:
            CatalogPage; a page past the end has no items
        """
        page_size = page_size or self._settings.catalog_page_size
        page = max(page, 1)

        matching = [
            product
            for product in self.fetch_products()
            if self.matches_category(product, category) and self.matches_query(product, query)
        ]

        start = (page - 1) * page_size
        total = len(matching)

        return CatalogPage(
            items=matching[start:start + page_size],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
        )

    # =========================================================================
    # DETAIL
    # =========================================================================

    def get_product(
        self,
        product_id: str,
        order: Optional[str] = None,
        variant_id: Optional[str] = None,
    ) -> ProductDetail:
        """
        Product detail with de-duplicated variants.

        Args:
            product_id: Product id
            order: "name", "rank" or None for store order
            variant_id: Variant to select; unknown ids select nothing

        Raises:
            StoreError: 'not_found' if the product does not exist
            ValueError: on an unknown order
        """
        if order is not None and order not in VARIANT_ORDERS:
            raise ValueError(f"Unknown variant order: {order}")

        product = self._store.fetch_one("products", product_id, embed=("category",))
        variants = deduplicate_variants(
            self._store.fetch("variants", filters={"product_id": product_id})
        )

        if order == "name":
            variants = sort_variants_by_name(variants)
        elif order == "rank":
            variants = sort_variants_by_rank(variants)

        selection = VariantSelection(variants, selected_id=variant_id)
        preview = self._settings.variant_preview_count

        return ProductDetail(
            product=product,
            variants=selection.variants,
            selected_variant=selection.selected,
            display_image=selection.display_image(
                product.get("image_url"), self._settings.placeholder_image_url
            ),
            hidden_variant_count=selection.hidden_count(preview),
        )
