"""
==============================================================================
Variant Tests
==============================================================================

Tests for variant identity, de-duplication, ordering and the variant
endpoints.

==============================================================================
"""

import pytest
from fastapi.testclient import TestClient

from storefront.catalog import (
    compute_ranks,
    deduplicate_variants,
    find_duplicate_variants,
    sort_variants_by_name,
    sort_variants_by_rank,
    store_variant_key,
    variant_key,
)
from storefront.store import RemoteStore


class TestVariantKeys:
    """Tests for variant identity keys."""

    def test_key_is_name_and_image(self):
        assert variant_key({"name": "Red", "image_url": "r.jpg"}) == ("Red", "r.jpg")

    def test_missing_name_counts_as_empty(self):
        assert variant_key({"image_url": "r.jpg"}) == ("", "r.jpg")

    def test_store_key_includes_product(self):
        variant = {"product_id": "p1", "name": "Red", "image_url": None}
        assert store_variant_key(variant) == ("p1", "Red", None)

    def test_reads_attributes(self):
        class Row:
            name = "Red"
            image_url = "r.jpg"

        assert variant_key(Row()) == ("Red", "r.jpg")


class TestDeduplication:
    """Tests for collapsing duplicate variants."""

    def test_keeps_first_occurrence(self):
        variants = [
            {"id": "1", "name": "Red", "image_url": "r.jpg"},
            {"id": "2", "name": "Blue", "image_url": "b.jpg"},
            {"id": "3", "name": "Red", "image_url": "r.jpg"},
        ]
        assert [v["id"] for v in deduplicate_variants(variants)] == ["1", "2"]

    def test_same_name_different_image_is_distinct(self):
        variants = [
            {"id": "1", "name": "Red", "image_url": "r.jpg"},
            {"id": "2", "name": "Red", "image_url": "r2.jpg"},
        ]
        assert len(deduplicate_variants(variants)) == 2

    def test_case_matters(self):
        variants = [
            {"id": "1", "name": "Red", "image_url": None},
            {"id": "2", "name": "red", "image_url": None},
        ]
        assert len(deduplicate_variants(variants)) == 2

    def test_both_images_missing_are_duplicates(self):
        variants = [
            {"id": "1", "name": "Red", "image_url": None},
            {"id": "2", "name": "Red"},
        ]
        assert [v["id"] for v in deduplicate_variants(variants)] == ["1"]

    def test_empty_input(self):
        assert deduplicate_variants([]) == []

    def test_input_not_modified(self):
        variants = [{"name": "A"}, {"name": "A"}]
        deduplicate_variants(variants)
        assert len(variants) == 2

    def test_duplicates_partition_input(self):
        variants = [
            {"id": "1", "name": "A"},
            {"id": "2", "name": "A"},
            {"id": "3", "name": "B"},
            {"id": "4", "name": "A"},
        ]
        kept = deduplicate_variants(variants)
        dropped = find_duplicate_variants(variants)

        assert [v["id"] for v in dropped] == ["2", "4"]
        assert len(kept) + len(dropped) == len(variants)

    def test_idempotent(self):
        variants = [{"name": "A"}, {"name": "B"}, {"name": "A"}]
        once = deduplicate_variants(variants)
        assert deduplicate_variants(once) == once


class TestOrdering:
    """Tests for name and rank ordering."""

    def test_name_order_ignores_case(self):
        variants = [{"name": "b"}, {"name": "A"}, {"name": "C"}]
        assert [v["name"] for v in sort_variants_by_name(variants)] == ["A", "b", "C"]

    def test_name_order_ignores_accents(self):
        variants = [{"name": "Zinc"}, {"name": "Éclair"}, {"name": "Apple"}]
        assert [v["name"] for v in sort_variants_by_name(variants)] == ["Apple", "Éclair", "Zinc"]

    def test_name_order_is_stable(self):
        variants = [{"id": "1", "name": "Red"}, {"id": "2", "name": "red"}, {"id": "3", "name": "Blue"}]
        assert [v["id"] for v in sort_variants_by_name(variants)] == ["3", "1", "2"]

    def test_rank_order_puts_unranked_last(self):
        variants = [
            {"id": "a", "position": None},
            {"id": "b", "position": 1},
            {"id": "c", "position": 0},
            {"id": "d"},
        ]
        assert [v["id"] for v in sort_variants_by_rank(variants)] == ["c", "b", "a", "d"]

    def test_compute_ranks(self):
        assert compute_ranks(["c", "a", "b"]) == {"c": 0, "a": 1, "b": 2}

    def test_compute_ranks_rejects_duplicates(self):
        with pytest.raises(ValueError):
            compute_ranks(["a", "b", "a"])


class TestVariantEndpoints:
    """Tests for variant CRUD endpoints."""

    def test_get_variant(self, client: TestClient, catalog: dict):
        response = client.get(f"/api/v1/variants/{catalog['blue']}")
        assert response.status_code == 200
        assert response.json()["variant"]["name"] == "Blue"

    def test_get_unknown_variant(self, client: TestClient, catalog: dict):
        response = client.get("/api/v1/variants/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "VARIANT_NOT_FOUND"

    def test_create_variant(self, client: TestClient, admin_headers: dict, catalog: dict):
        response = client.post(
            "/api/v1/variants",
            headers=admin_headers,
            json={"product_id": catalog["runner"], "name": "Size 42", "stock": 3}
        )
        assert response.status_code == 201
        variant = response.json()["variant"]
        assert variant["product_id"] == catalog["runner"]
        assert variant["stock"] == 3

    def test_create_variant_unknown_product(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/v1/variants",
            headers=admin_headers,
            json={"product_id": "missing", "name": "Size 42"}
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_identical_variant_is_stored_but_hidden(
        self, client: TestClient, admin_headers: dict, catalog: dict, store: RemoteStore
    ):
        response = client.post(
            "/api/v1/variants",
            headers=admin_headers,
            json={
                "product_id": catalog["shirt"],
                "name": "Blue",
                "image_url": "https://img.example.com/blue.jpg"
            }
        )
        assert response.status_code == 201
        assert store.count("variants", {"product_id": catalog["shirt"]}) == 5

        detail = client.get(f"/api/v1/products/{catalog['shirt']}").json()
        assert len(detail["variants"]) == 3

    def test_update_variant(self, client: TestClient, admin_headers: dict, catalog: dict):
        response = client.put(
            f"/api/v1/variants/{catalog['green']}",
            headers=admin_headers,
            json={"image_url": "https://img.example.com/green.jpg"}
        )
        assert response.status_code == 200
        variant = response.json()["variant"]
        assert variant["name"] == "Émeraude"
        assert variant["image_url"] == "https://img.example.com/green.jpg"

    def test_update_unknown_variant(self, client: TestClient, admin_headers: dict):
        response = client.put(
            "/api/v1/variants/missing",
            headers=admin_headers,
            json={"name": "X"}
        )
        assert response.status_code == 404

    def test_delete_variant(self, client: TestClient, admin_headers: dict, catalog: dict, store: RemoteStore):
        response = client.delete(f"/api/v1/variants/{catalog['blue']}", headers=admin_headers)
        assert response.status_code == 200
        assert store.count("variants", {"id": catalog["blue"]}) == 0

    def test_write_requires_auth(self, client: TestClient, catalog: dict):
        response = client.delete(f"/api/v1/variants/{catalog['blue']}")
        assert response.status_code == 401
