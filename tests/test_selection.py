"""
==============================================================================
Variant Selection Tests
==============================================================================
"""

import asyncio

import pytest

from storefront.catalog import VariantSelection
from storefront.services.reorder_service import ReorderResult


VARIANTS = [
    {"id": "a", "name": "Small", "image_url": "small.jpg"},
    {"id": "b", "name": "Medium", "image_url": None},
    {"id": "c", "name": "Large", "image_url": "large.jpg"},
]


class TestSelection:
    """Tests for selecting a variant."""

    def test_nothing_selected_by_default(self):
        selection = VariantSelection(VARIANTS)
        assert selection.selected is None
        assert len(selection) == 3

    def test_initial_selection(self):
        selection = VariantSelection(VARIANTS, selected_id="c")
        assert selection.selected["name"] == "Large"

    def test_unknown_initial_selection_is_ignored(self):
        selection = VariantSelection(VARIANTS, selected_id="zzz")
        assert selection.selected is None

    def test_select_and_clear(self):
        selection = VariantSelection(VARIANTS)
        assert selection.select("b")["name"] == "Medium"
        assert selection.select(None) is None
        assert selection.selected is None

    def test_select_unknown_raises(self):
        selection = VariantSelection(VARIANTS, selected_id="a")
        with pytest.raises(KeyError):
            selection.select("zzz")
        assert selection.selected["id"] == "a"

    def test_variants_returns_copy(self):
        selection = VariantSelection(VARIANTS)
        selection.variants.clear()
        assert len(selection) == 3


class TestVisibility:
    """Tests for compact listing helpers."""

    def test_visible_and_hidden(self):
        selection = VariantSelection(VARIANTS)
        assert [v["id"] for v in selection.visible(2)] == ["a", "b"]
        assert selection.hidden_count(2) == 1

    def test_limit_larger_than_list(self):
        selection = VariantSelection(VARIANTS)
        assert len(selection.visible(10)) == 3
        assert selection.hidden_count(10) == 0

    def test_zero_limit(self):
        selection = VariantSelection(VARIANTS)
        assert selection.visible(0) == []
        assert selection.hidden_count(0) == 3


class TestDisplayImage:
    """Tests for the image shown next to the picker."""

    def test_selected_variant_image_wins(self):
        selection = VariantSelection(VARIANTS, selected_id="c")
        assert selection.display_image("product.jpg", "placeholder.jpg") == "large.jpg"

    def test_selected_without_image_uses_product(self):
        selection = VariantSelection(VARIANTS, selected_id="b")
        assert selection.display_image("product.jpg", "placeholder.jpg") == "product.jpg"

    def test_placeholder_when_nothing_has_an_image(self):
        selection = VariantSelection(VARIANTS)
        assert selection.display_image(None, "placeholder.jpg") == "placeholder.jpg"


class TestReorder:
    """Tests for the optional reorder capability."""

    def test_reorder_disabled_without_reorderer(self):
        selection = VariantSelection(VARIANTS)
        assert selection.can_reorder is False
        with pytest.raises(RuntimeError):
            asyncio.run(selection.reorder(["c", "b", "a"]))

    def test_reorder_persists_then_applies(self):
        calls = []

        async def reorderer(ordered_ids):
            calls.append(list(ordered_ids))
            return "ok"

        selection = VariantSelection(VARIANTS, reorderer=reorderer)
        assert selection.can_reorder is True

        result = asyncio.run(selection.reorder(["c", "a"]))

        assert result == "ok"
        assert calls == [["c", "a"]]
        assert [v["id"] for v in selection.variants] == ["c", "a", "b"]

    def test_failed_reorder_keeps_local_order(self):
        async def reorderer(ordered_ids):
            raise RuntimeError("store unavailable")

        selection = VariantSelection(VARIANTS, reorderer=reorderer)

        with pytest.raises(RuntimeError):
            asyncio.run(selection.reorder(["c", "b", "a"]))
        assert [v["id"] for v in selection.variants] == ["a", "b", "c"]

    def test_unsuccessful_result_keeps_local_order(self):
        async def reorderer(ordered_ids):
            return ReorderResult(success=False, failed=list(ordered_ids))

        selection = VariantSelection(VARIANTS, reorderer=reorderer)

        result = asyncio.run(selection.reorder(["b", "a"]))

        assert result.success is False
        assert [v["id"] for v in selection.variants] == ["a", "b", "c"]
