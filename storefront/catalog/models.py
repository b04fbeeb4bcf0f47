"""
==============================================================================
Catalog Models Module
==============================================================================

Pydantic models for catalog browsing results.

==============================================================================
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogPage(BaseModel):
    """
    One page of the filtered catalog listing.

    Attributes:
        items: Product rows with embedded category and de-duplicated variants
        total: Number of products matching the filters (all pages)
        page: 1-based page number
        page_size: Products per page
        total_pages: Number of pages for ``total`` (0 when nothing matches)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 32
    total_pages: int = 0


class ProductDetail(BaseModel):
    """
    A product with its de-duplicated, ordered variants and the resolved
    selection state.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    product: Dict[str, Any]
    variants: List[Dict[str, Any]] = Field(default_factory=list)
    selected_variant: Optional[Dict[str, Any]] = None
    display_image: str
    hidden_variant_count: int = 0
