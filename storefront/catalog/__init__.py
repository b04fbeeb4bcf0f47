"""
==============================================================================
Catalog Package - Variants and Browsing
==============================================================================

Variant de-duplication and ordering, variant selection, and the catalog
listing built on them.

Modules:
--------
- variants: deduplicate_variants, sort_variants_by_name/rank, compute_ranks
- selection: VariantSelection
- browser: CatalogBrowser (listing, filtering, pagination, detail)
- models: CatalogPage, ProductDetail

==============================================================================
"""

from .variants import (
    compute_ranks,
    deduplicate_variants,
    field_value,
    find_duplicate_variants,
    sort_variants_by_name,
    sort_variants_by_rank,
    store_variant_key,
    variant_key,
)
from .selection import VariantSelection
from .models import CatalogPage, ProductDetail
from .browser import ALL_CATEGORIES, CatalogBrowser

__all__ = [
    "compute_ranks",
    "deduplicate_variants",
    "field_value",
    "find_duplicate_variants",
    "sort_variants_by_name",
    "sort_variants_by_rank",
    "store_variant_key",
    "variant_key",
    "VariantSelection",
    "CatalogPage",
    "ProductDetail",
    "ALL_CATEGORIES",
    "CatalogBrowser",
]
