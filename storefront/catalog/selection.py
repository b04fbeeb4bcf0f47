"""
==============================================================================
Variant Selection
==============================================================================

Selection state for a product's variant picker, independent of how it is
rendered. The product detail endpoint builds one per request from the
``variant_id`` query parameter.

    selection = VariantSelection(variants, selected_id="v2")
    selection.visible(2)        # first two variants for a compact list
    selection.hidden_count(2)   # "+N more"
    selection.display_image(product["image_url"], placeholder)

Reordering is an optional capability: pass a ``reorderer`` coroutine
function (ReorderService.reorder_variants) to enable ``reorder``. The
variant order endpoint builds one this way and returns the reordered list.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from .variants import field_value


# Module logger
logger = logging.getLogger(__name__)

Reorderer = Callable[[Sequence[str]], Awaitable[Any]]


class VariantSelection:
    """
    Variants of one product plus the currently selected one.

    Attributes:
        variants: Variants in display order
        selected: Selected variant, or None

    Example:
        >>> selection = VariantSelection([{"id": "a", "name": "S"}])
        >>> selection.select("a")["name"]
        'S'
    """

    def __init__(
        self,
        variants: Sequence[Any],
        selected_id: Optional[str] = None,
        reorderer: Optional[Reorderer] = None,
    ) -> None:
        self._variants: List[Any] = list(variants)
        self._selected: Optional[Any] = None
        self._reorderer = reorderer

        try:
            self.select(selected_id)
        except KeyError:
            logger.debug(f"Ignoring unknown selected variant: {selected_id}")

    def _find(self, variant_id: str) -> Optional[Any]:
        for variant in self._variants:
            if field_value(variant, "id") == variant_id:
                return variant
        return None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def variants(self) -> List[Any]:
        return list(self._variants)

    @property
    def selected(self) -> Optional[Any]:
        return self._selected

    @property
    def can_reorder(self) -> bool:
        return self._reorderer is not None

    # =========================================================================
    # SELECTION
    # =========================================================================

    def select(self, variant_id: Optional[str]) -> Optional[Any]:
        """
        Select a variant by id, or clear the selection with None.

        Raises:
            KeyError: if no variant has this id
        """
        if variant_id is None:
            self._selected = None
            return None

        variant = self._find(variant_id)
        if variant is None:
            raise KeyError(variant_id)

        self._selected = variant
        return variant

    def visible(self, limit: int) -> List[Any]:
        """First ``limit`` variants."""
        return self._variants[:max(limit, 0)]

    def hidden_count(self, limit: int) -> int:
        """How many variants ``visible(limit)`` leaves out."""
        return max(len(self._variants) - max(limit, 0), 0)

    def display_image(self, product_image: Optional[str], placeholder: str) -> str:
        """
        Image to show: the selected variant's, else the product's, else
        the placeholder.
        """
        if self._selected is not None:
            image = field_value(self._selected, "image_url")
            if image:
                return image
        return product_image or placeholder

    # =========================================================================
    # REORDERING
    # =========================================================================

    async def reorder(self, ordered_ids: Sequence[str]) -> Any:
        """
        Persist a new order through the reorderer, then apply it locally.

        A result whose ``success`` is false leaves the local order as it was.

        Variants missing from ``ordered_ids`` keep their relative order
        after the listed ones.

        Raises:
            RuntimeError: if no reorderer was configured
        """
        if self._reorderer is None:
            raise RuntimeError("Reordering is not enabled for this selection")

        result = await self._reorderer(ordered_ids)
        if not getattr(result, "success", True):
            logger.warning("Reorder was not persisted, keeping current order")
            return result

        position = {variant_id: index for index, variant_id in enumerate(ordered_ids)}
        self._variants.sort(
            key=lambda variant: position.get(field_value(variant, "id"), len(position))
        )
        return result

    def __len__(self) -> int:
        return len(self._variants)

    def __repr__(self) -> str:
        selected_id = field_value(self._selected, "id") if self._selected is not None else None
        return f"VariantSelection(variants={len(self._variants)}, selected={selected_id!r})"
