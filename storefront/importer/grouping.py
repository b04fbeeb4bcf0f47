"""
==============================================================================
Import Row Grouping Module
==============================================================================

Folds flat spreadsheet rows into products with their variants.

    product_id | name | category | variant_name
    P1         | Tee  | Tops     | S
    P1         |      |          | M
    P2         | Cap  |          |

    -> Tee (Tops, variants S, M), Cap (default category, no variants)

Rules:
-----
- Product key: product_id, else name; rows with neither are skipped
- The first row of a key supplies the product fields
- Missing category / price take the configured defaults
- A row adds a variant only when variant_name is present
- Products come out in first-seen order, variants in row order

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import ImportProduct, ImportVariant
from .spreadsheet import SpreadsheetError


# Module logger
logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        # spreadsheet cells hold ids like 101 as 101.0
        value = int(value)
    text = str(value).strip()
    return text or None


def _price(value: Any, row_number: int) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SpreadsheetError(f"Row {row_number}: invalid price {value!r}") from None


def group_import_rows(
    rows: Sequence[Mapping[str, Any]],
    default_category: str = "edit",
    default_price: Optional[float] = 10,
) -> List[ImportProduct]:
    """
    Group spreadsheet rows by product key.

    Args:
        rows: Row dicts as produced by read_spreadsheet
        default_category: Category used when the first row has none
        default_price: Price used when the first row has none

    Returns:
        ImportProducts in first-seen order

    Raises:
        SpreadsheetError: if a product's price is not numeric
    """
    products: Dict[str, ImportProduct] = {}

    for index, row in enumerate(rows, start=1):
        key = _text(row.get("product_id")) or _text(row.get("name"))
        if key is None:
            logger.warning(f"⚠️ Skipping row {index}: no product_id or name")
            continue

        product = products.get(key)
        if product is None:
            price = _price(row.get("price"), index)
            product = ImportProduct(
                key=key,
                name=_text(row.get("name")) or key,
                category=_text(row.get("category")) or default_category,
                image_url=_text(row.get("image_url")),
                price=default_price if price is None else price,
            )
            products[key] = product

        variant_name = _text(row.get("variant_name"))
        if variant_name:
            product.variants.append(
                ImportVariant(
                    name=variant_name,
                    image_url=_text(row.get("variant_image_url")),
                )
            )

    logger.debug(f"Grouped {len(rows)} row(s) into {len(products)} product(s)")
    return list(products.values())
