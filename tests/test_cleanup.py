"""
==============================================================================
Duplicate Variant Cleanup Tests
==============================================================================
"""

from fastapi.testclient import TestClient

from storefront.services.cleanup_service import CleanupService
from storefront.store import RemoteStore, StoreError


class TestCleanupService:
    """Tests for CleanupService."""

    def test_removes_later_duplicates(self, store: RemoteStore, catalog: dict):
        report = CleanupService(store).remove_duplicate_variants()

        assert report.scanned == 4
        assert report.duplicates_found == 1
        assert report.deleted == 1
        assert report.failed == []

        remaining = {row["id"] for row in store.fetch("variants")}
        assert catalog["red"] in remaining
        assert catalog["red_duplicate"] not in remaining

    def test_same_variant_on_other_product_is_kept(self, store: RemoteStore, catalog: dict):
        store.insert("variants", [
            {"product_id": catalog["runner"], "name": "Red", "image_url": "https://img.example.com/red.jpg"},
        ])

        report = CleanupService(store).remove_duplicate_variants()

        assert report.deleted == 1
        assert store.count("variants", {"product_id": catalog["runner"]}) == 1

    def test_nothing_to_do(self, store: RemoteStore, catalog: dict):
        service = CleanupService(store)
        service.remove_duplicate_variants()

        report = service.remove_duplicate_variants()

        assert report.duplicates_found == 0
        assert report.deleted == 0

    def test_failed_delete_is_reported(self, catalog: dict):
        class StuckStore(RemoteStore):
            def delete(self, collection, row_id=None, *, filters=None):
                raise StoreError("locked", StoreError.UNAVAILABLE, collection)

        report = CleanupService(StuckStore()).remove_duplicate_variants()

        assert report.deleted == 0
        assert report.failed == [catalog["red_duplicate"]]


class TestCleanupEndpoint:
    """Tests for POST /variants/remove-duplicates."""

    def test_remove_duplicates(self, client: TestClient, admin_headers: dict, catalog: dict):
        response = client.post("/api/v1/variants/remove-duplicates", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["deleted"] == 1

    def test_requires_auth(self, client: TestClient, catalog: dict):
        response = client.post("/api/v1/variants/remove-duplicates")
        assert response.status_code == 401
