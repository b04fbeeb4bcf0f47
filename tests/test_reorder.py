"""
==============================================================================
Variant Reorder Tests
==============================================================================

Tests for rank persistence, including writes that fail part way.

==============================================================================
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from storefront.core.exceptions import AppException
from storefront.main import app
from storefront.services.reorder_service import ReorderService
from storefront.store import RemoteStore, StoreError, get_store


class FlakyStore(RemoteStore):
    """Store whose rank writes fail for chosen variant ids."""

    def __init__(self, failing_ids):
        super().__init__()
        self._failing_ids = set(failing_ids)

    def update(self, collection, row_id, fields):
        if row_id in self._failing_ids:
            raise StoreError("simulated outage", StoreError.UNAVAILABLE, collection)
        return super().update(collection, row_id, fields)


def positions(store: RemoteStore, product_id: str) -> dict:
    return {
        row["id"]: row["position"]
        for row in store.fetch("variants", {"product_id": product_id})
    }


class TestReorderService:
    """Tests for ReorderService."""

    def test_writes_contiguous_ranks(self, store: RemoteStore, catalog: dict):
        order = [catalog["green"], catalog["blue"], catalog["red"]]

        result = asyncio.run(ReorderService(store).reorder_variants(order))

        assert result.success is True
        assert result.ranks == {catalog["green"]: 0, catalog["blue"]: 1, catalog["red"]: 2}
        assert sorted(result.updated) == sorted(order)
        stored = positions(store, catalog["shirt"])
        assert stored[catalog["green"]] == 0
        assert stored[catalog["blue"]] == 1
        assert stored[catalog["red"]] == 2
        assert stored[catalog["red_duplicate"]] is None

    def test_unchanged_ranks_are_not_rewritten(self, store: RemoteStore, catalog: dict):
        order = [catalog["red"], catalog["blue"]]
        service = ReorderService(store)

        asyncio.run(service.reorder_variants(order))
        result = asyncio.run(service.reorder_variants(order))

        assert result.success is True
        assert result.updated == []
        assert sorted(result.unchanged) == sorted(order + [catalog["green"]])

    def test_duplicate_ids_rejected(self, store: RemoteStore, catalog: dict):
        with pytest.raises(AppException) as exc_info:
            asyncio.run(ReorderService(store).reorder_variants([catalog["red"], catalog["red"]]))

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert positions(store, catalog["shirt"])[catalog["red"]] is None

    def test_unknown_id_writes_nothing(self, store: RemoteStore, catalog: dict):
        with pytest.raises(AppException) as exc_info:
            asyncio.run(ReorderService(store).reorder_variants([catalog["blue"], "missing"]))

        assert exc_info.value.code == "VARIANT_NOT_FOUND"
        assert positions(store, catalog["shirt"])[catalog["blue"]] is None

    def test_partial_list_ranks_whole_product(self, store: RemoteStore, catalog: dict):
        service = ReorderService(store)
        asyncio.run(service.reorder_variants([catalog["red"], catalog["blue"], catalog["green"]]))

        result = asyncio.run(service.reorder_variants([catalog["green"]]))

        assert result.success is True
        assert result.ranks == {catalog["green"]: 0, catalog["red"]: 1, catalog["blue"]: 2}
        stored = positions(store, catalog["shirt"])
        assert stored[catalog["green"]] == 0
        assert stored[catalog["red"]] == 1
        assert stored[catalog["blue"]] == 2

    def test_ids_from_two_products_rejected(self, store: RemoteStore, catalog: dict):
        runner_variant = store.insert("variants", [
            {"product_id": catalog["runner"], "name": "Black"},
        ])[0]

        with pytest.raises(AppException) as exc_info:
            asyncio.run(ReorderService(store).reorder_variants([runner_variant["id"], catalog["red"]]))

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert positions(store, catalog["shirt"])[catalog["red"]] is None
        assert positions(store, catalog["runner"])[runner_variant["id"]] is None

    def test_partial_failure_keeps_applied_writes(self, catalog: dict):
        store = FlakyStore({catalog["blue"]})
        order = [catalog["green"], catalog["blue"], catalog["red"]]

        result = asyncio.run(ReorderService(store).reorder_variants(order))

        assert result.success is False
        assert result.failed == [catalog["blue"]]
        assert sorted(result.updated) == sorted([catalog["green"], catalog["red"]])
        assert result.partially_applied is True

        stored = positions(store, catalog["shirt"])
        assert stored[catalog["green"]] == 0
        assert stored[catalog["blue"]] is None
        assert stored[catalog["red"]] == 2

    def test_total_failure_is_not_partial(self, catalog: dict):
        order = [catalog["red"], catalog["blue"], catalog["green"]]
        store = FlakyStore(order)

        result = asyncio.run(ReorderService(store).reorder_variants(order))

        assert result.success is False
        assert result.updated == []
        assert result.partially_applied is False


class TestReorderEndpoint:
    """Tests for PUT /variants/order."""

    def test_reorder_then_view_by_rank(self, client: TestClient, admin_headers: dict, catalog: dict):
        order = [catalog["green"], catalog["red"], catalog["blue"]]

        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": order}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["ranks"][catalog["green"]] == 0
        assert [v["id"] for v in data["variants"]] == order
        assert [v["position"] for v in data["variants"]] == [0, 1, 2]

        detail = client.get(
            f"/api/v1/products/{catalog['shirt']}", params={"order": "rank"}
        ).json()
        assert [v["id"] for v in detail["variants"]] == order

    def test_requires_auth(self, client: TestClient, catalog: dict):
        response = client.put("/api/v1/variants/order", json={"variant_ids": [catalog["red"]]})
        assert response.status_code == 401

    def test_empty_order_rejected(self, client: TestClient, admin_headers: dict):
        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": []}
        )
        assert response.status_code == 422

    def test_duplicate_ids_rejected(self, client: TestClient, admin_headers: dict, catalog: dict):
        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": [catalog["red"], catalog["red"]]}
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_partial_list_moves_listed_first(self, client: TestClient, admin_headers: dict, catalog: dict):
        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": [catalog["blue"]]}
        )

        assert response.status_code == 200
        assert [v["id"] for v in response.json()["variants"]] == [
            catalog["blue"], catalog["red"], catalog["green"]
        ]

    def test_ids_from_two_products_rejected(
        self, client: TestClient, admin_headers: dict, store: RemoteStore, catalog: dict
    ):
        runner_variant = store.insert("variants", [
            {"product_id": catalog["runner"], "name": "Black"},
        ])[0]

        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": [runner_variant["id"], catalog["red"]]}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_partial_failure_reported(self, client: TestClient, admin_headers: dict, catalog: dict):
        app.dependency_overrides[get_store] = lambda: FlakyStore({catalog["red"]})

        response = client.put(
            "/api/v1/variants/order",
            headers=admin_headers,
            json={"variant_ids": [catalog["blue"], catalog["red"]]}
        )

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "REORDER_FAILED"
        assert error["details"]["failed"] == [catalog["red"]]
        assert error["details"]["updated"] == [catalog["blue"], catalog["green"]]
        assert error["details"]["partially_applied"] is True
