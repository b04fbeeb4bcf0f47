"""
==============================================================================
Import Models Module
==============================================================================

Pydantic models passed between the grouping step and the import run.

==============================================================================
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ImportVariant(BaseModel):
    """Variant taken from one spreadsheet row."""

    name: str = Field(..., min_length=1)
    image_url: Optional[str] = None


class ImportProduct(BaseModel):
    """
    One product assembled from all rows sharing a product key.

    Attributes:
        key: product_id column if present, otherwise the name
        name: Product name (falls back to the key)
        category: Category name resolved by exact match at import time
        image_url: Product image
        price: Product price
        variants: Variants in row order
    """

    key: str
    name: str
    category: str
    image_url: Optional[str] = None
    price: Optional[float] = None
    variants: List[ImportVariant] = Field(default_factory=list)


class ImportResult(BaseModel):
    """
    Outcome of an import run.

    ``progress`` is the fraction of products completed and stays at the
    last successful value when the run halts. ``partially_applied`` is true
    when the run failed after committing at least one write.
    """

    success: bool
    error: Optional[str] = None
    partially_applied: bool = False
    products_processed: int = 0
    total_products: int = 0
    progress: float = 0.0
