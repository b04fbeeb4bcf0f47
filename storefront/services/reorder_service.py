"""
==============================================================================
Variant Reorder Service Module
==============================================================================

Persists a new display order for the variants of one product as contiguous
zero-based ranks. Listed variants come first; the product's other visible
variants follow in their current rank order.

Reorder Flow:
------------
    ordered ids [c, a]
         │               duplicate ids → VALIDATION_ERROR
    ┌────▼─────────────┐
    │ fetch product    │  unknown ids → VARIANT_NOT_FOUND
    │                  │  several products → VALIDATION_ERROR (nothing written)
    └────┬─────────────┘
    ┌────▼─────────────┐
    │ compute ranks    │  [c, a] + unlisted [b] → {c: 0, a: 1, b: 2}
    └────┬─────────────┘
    ┌────▼─────────────┐
    │ write changed    │  one request per variant, all in flight together
    └────┬─────────────┘
    ┌────▼─────────────┐
    │ ReorderResult    │  failed writes listed; applied writes stay applied
    └──────────────────┘

The store client is synchronous, so each write runs on a worker thread
and the coroutine waits for all of them with asyncio.gather.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from storefront.catalog import compute_ranks, deduplicate_variants, sort_variants_by_rank
from storefront.core import exceptions
from storefront.store import RemoteStore, StoreError

from .store_errors import translate_store_error


# Module logger
logger = logging.getLogger(__name__)


class ReorderResult(BaseModel):
    """
    Outcome of a reorder.

    Attributes:
        success: True when every changed rank was written
        ranks: Requested rank per variant id
        updated: Ids whose rank was written
        unchanged: Ids already at their requested rank (no write issued)
        failed: Ids whose write failed
        partially_applied: True when some writes applied and some failed
    """

    success: bool
    ranks: Dict[str, int] = Field(default_factory=dict)
    updated: List[str] = Field(default_factory=list)
    unchanged: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    partially_applied: bool = False


class ReorderService:
    """
    Variant rank writer.

    Ranks always cover every visible variant of the product, so a partial
    list moves the listed variants to the front and the rest follow in
    their current order.

    Example:
        >>> service = ReorderService(RemoteStore())
        >>> result = await service.reorder_variants(["c", "a", "b"])
        >>> result.ranks
        {'c': 0, 'a': 1, 'b': 2}
    """

    def __init__(self, store: RemoteStore) -> None:
        self._store = store

    def _write_rank(self, variant_id: str, rank: int) -> None:
        self._store.update("variants", variant_id, {"position": rank})

    def _product_rows(self, ordered_ids: Sequence[str]) -> List[dict]:
        try:
            listed = self._store.fetch("variants", {"id": list(dict.fromkeys(ordered_ids))})
        except StoreError as e:
            raise translate_store_error(e) from e

        found = {row["id"] for row in listed}
        missing = [variant_id for variant_id in ordered_ids if variant_id not in found]
        if missing:
            raise exceptions.variant_not_found(missing[0])

        product_ids = sorted({row["product_id"] for row in listed})
        if len(product_ids) > 1:
            raise exceptions.validation_error(
                "Variants of different products cannot be ordered together",
                {"product_ids": product_ids}
            )

        try:
            return self._store.fetch("variants", {"product_id": product_ids[0]})
        except StoreError as e:
            raise translate_store_error(e) from e

    async def product_variants(self, ordered_ids: Sequence[str]) -> List[dict]:
        """
        Visible variants of the product ``ordered_ids`` belong to, by rank.

        Raises:
            AppException: VARIANT_NOT_FOUND on unknown ids, VALIDATION_ERROR
                when the ids span several products
        """
        rows = await asyncio.to_thread(self._product_rows, ordered_ids)
        return sort_variants_by_rank(deduplicate_variants(rows))

    async def reorder_variants(self, ordered_ids: Sequence[str]) -> ReorderResult:
        """
        Put the listed variants first, in the given order, and rank the
        whole product from zero.

        Raises:
            AppException: VALIDATION_ERROR on duplicate ids or ids from
                several products, VARIANT_NOT_FOUND on unknown ids,
                STORE_ERROR if the current ranks cannot be read
        """
        try:
            compute_ranks(ordered_ids)
        except ValueError as e:
            raise exceptions.validation_error(str(e), {"variant_ids": list(ordered_ids)}) from e

        if not ordered_ids:
            return ReorderResult(success=True)

        rows = await asyncio.to_thread(self._product_rows, ordered_ids)

        listed = set(ordered_ids)
        rest = [
            row["id"] for row in sort_variants_by_rank(deduplicate_variants(rows))
            if row["id"] not in listed
        ]
        ranks = compute_ranks(list(ordered_ids) + rest)

        current = {row["id"]: row.get("position") for row in rows}
        changed = [variant_id for variant_id, rank in ranks.items() if current[variant_id] != rank]
        unchanged = [variant_id for variant_id in ranks if variant_id not in changed]

        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self._write_rank, variant_id, ranks[variant_id]) for variant_id in changed),
            return_exceptions=True,
        )

        updated: List[str] = []
        failed: List[str] = []

        for variant_id, outcome in zip(changed, outcomes):
            if isinstance(outcome, StoreError):
                logger.error(f"❌ Rank write failed for variant {variant_id}: {outcome.message}")
                failed.append(variant_id)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                updated.append(variant_id)

        result = ReorderResult(
            success=not failed,
            ranks=ranks,
            updated=updated,
            unchanged=unchanged,
            failed=failed,
            partially_applied=bool(failed) and bool(updated),
        )

        if failed:
            logger.warning(
                f"⚠️ Reorder incomplete: {len(updated)} written, {len(failed)} failed"
            )
        else:
            logger.info(f"🔀 Reordered {len(ranks)} variant(s), {len(updated)} rank(s) written")

        return result
