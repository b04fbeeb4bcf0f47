"""
==============================================================================
Duplicate Variant Cleanup Service Module
==============================================================================

Purges duplicate variant rows from the store.

Repeated imports append variants without checking what a product already
has, so identical rows pile up. Listings hide them; this service removes
them for good.

Cleanup Flow:
------------
1. Fetch every variant
2. Find the rows whose (product_id, name, image_url) was already seen
3. Delete each duplicate with its own request

A failed delete is logged and recorded; the remaining deletes still run.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List

from pydantic import BaseModel, Field

from storefront.catalog import find_duplicate_variants, store_variant_key
from storefront.store import RemoteStore, StoreError

from .store_errors import translate_store_error


# Module logger
logger = logging.getLogger(__name__)


class CleanupReport(BaseModel):
    """Outcome of a duplicate purge."""

    scanned: int = 0
    duplicates_found: int = 0
    deleted: int = 0
    failed: List[str] = Field(default_factory=list)


class CleanupService:
    """
    Store-wide duplicate variant removal.

    The first row of each (product_id, name, image_url) group in store
    order survives, the same row listings show.

    Example:
        >>> report = CleanupService(RemoteStore()).remove_duplicate_variants()
        >>> report.deleted
        3
    """

    def __init__(self, store: RemoteStore) -> None:
        self._store = store

    def remove_duplicate_variants(self) -> CleanupReport:
        """
        Delete duplicate variant rows.

        Raises:
            AppException: STORE_ERROR if the variants cannot be fetched
        """
        try:
            variants = self._store.fetch("variants")
        except StoreError as e:
            raise translate_store_error(e) from e

        duplicates = find_duplicate_variants(variants, key=store_variant_key)
        report = CleanupReport(scanned=len(variants), duplicates_found=len(duplicates))

        if not duplicates:
            logger.info(f"✅ No duplicate variants among {len(variants)} row(s)")
            return report

        logger.info(f"🧹 Removing {len(duplicates)} duplicate variant(s)")

        for variant in duplicates:
            try:
                report.deleted += self._store.delete("variants", variant["id"])
            except StoreError as e:
                logger.error(f"Error deleting duplicate variant {variant['id']}: {e.message}")
                report.failed.append(variant["id"])

        logger.info(
            f"🗑️ Duplicate cleanup: deleted {report.deleted}, failed {len(report.failed)}"
        )
        return report
