"""
==============================================================================
Store Error Translation
==============================================================================

Maps StoreError codes onto API exceptions at service call sites.

    try:
        row = self._store.fetch_one("products", product_id)
    except StoreError as e:
        raise translate_store_error(e, exceptions.product_not_found(product_id))

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from storefront.core import exceptions
from storefront.core.exceptions import AppException
from storefront.store import StoreError


# Module logger
logger = logging.getLogger(__name__)


def translate_store_error(
    error: StoreError,
    not_found: Optional[AppException] = None,
    conflict_message: Optional[str] = None,
) -> AppException:
    """
    Build the AppException for a failed store call.

    Args:
        error: The StoreError raised by the store client
        not_found: Exception to use for a 'not_found' code
        conflict_message: Message to use for a 'conflict' code

    Returns:
        AppException to raise (chained to ``error`` by the caller)
    """
    if error.code == StoreError.NOT_FOUND and not_found is not None:
        return not_found

    if error.code == StoreError.CONFLICT:
        logger.info(f"Store conflict on {error.collection}: {error.message}")
        return exceptions.conflict(
            conflict_message or "Write conflicts with existing data",
            {"collection": error.collection} if error.collection else None,
        )

    logger.error(f"❌ Store request failed ({error.code}) on {error.collection}: {error.message}")
    return exceptions.store_error()
