"""
==============================================================================
Bulk Import Tests
==============================================================================

Tests for spreadsheet parsing, row grouping, the import run and the
import job endpoints.

==============================================================================
"""

import io
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from storefront.importer import SpreadsheetError, group_import_rows, read_spreadsheet, rows_from_table
from storefront.services.import_service import ImportJobRegistry, ImportService, ImportStatus
from storefront.store import RemoteStore, StoreError


HEADER = ["product_id", "name", "category", "image_url", "price", "variant_name", "variant_image_url"]


def make_xlsx(rows) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_csv(rows) -> bytes:
    lines = [",".join("" if cell is None else str(cell) for cell in row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")


class TestSpreadsheetReading:
    """Tests for reading uploaded files."""

    def test_headers_are_normalized(self):
        rows = rows_from_table([["Product ID", " Variant  Name "], ["1", "Red"]])
        assert rows == [{"product_id": "1", "variant_name": "Red"}]

    def test_blank_rows_and_cells_are_skipped(self):
        rows = rows_from_table([
            [None, None],
            ["name", "price"],
            ["Shirt", ""],
            [None, "  "],
        ])
        assert rows == [{"name": "Shirt"}]

    def test_read_xlsx(self):
        content = make_xlsx([
            HEADER,
            [101, "Tee", "Tops", None, 12.5, "Red", "red.jpg"],
        ])
        rows = read_spreadsheet("catalog.xlsx", content)
        assert rows == [{
            "product_id": 101,
            "name": "Tee",
            "category": "Tops",
            "price": 12.5,
            "variant_name": "Red",
            "variant_image_url": "red.jpg",
        }]

    def test_read_csv_with_bom(self):
        content = b"\xef\xbb\xbf" + make_csv([["name", "price"], ["Tee", "9"]])
        assert read_spreadsheet("catalog.CSV", content) == [{"name": "Tee", "price": "9"}]

    def test_unsupported_extension(self):
        with pytest.raises(SpreadsheetError):
            read_spreadsheet("catalog.txt", b"name\nTee\n")

    def test_corrupt_workbook(self):
        with pytest.raises(SpreadsheetError):
            read_spreadsheet("catalog.xlsx", b"definitely not a zip file")


class TestRowGrouping:
    """Tests for grouping rows into products."""

    def test_groups_by_product_id(self):
        products = group_import_rows([
            {"product_id": 1, "name": "Tee", "category": "Tops", "price": 12, "variant_name": "S"},
            {"product_id": 1, "name": "ignored", "variant_name": "M", "variant_image_url": "m.jpg"},
            {"product_id": 2, "name": "Cap", "category": "Hats", "price": 8},
        ])

        assert [p.key for p in products] == ["1", "2"]
        tee, cap = products
        assert tee.name == "Tee"
        assert [v.name for v in tee.variants] == ["S", "M"]
        assert tee.variants[1].image_url == "m.jpg"
        assert cap.variants == []

    def test_name_is_key_without_product_id(self):
        products = group_import_rows([
            {"name": "Tee", "variant_name": "S"},
            {"name": "Tee", "variant_name": "M"},
        ])
        assert len(products) == 1
        assert products[0].key == "Tee"

    def test_float_ids_match_integer_ids(self):
        products = group_import_rows([
            {"product_id": 101.0, "name": "Tee"},
            {"product_id": "101", "variant_name": "S"},
        ])
        assert len(products) == 1
        assert products[0].key == "101"

    def test_defaults_apply_when_missing(self):
        product = group_import_rows([{"name": "Tee"}], default_category="edit", default_price=10)[0]
        assert product.category == "edit"
        assert product.price == 10

    def test_zero_price_is_kept(self):
        product = group_import_rows([{"name": "Freebie", "price": 0}])[0]
        assert product.price == 0

    def test_rows_without_key_are_skipped(self):
        products = group_import_rows([{"category": "Tops"}, {"name": "Tee"}])
        assert [p.name for p in products] == ["Tee"]

    def test_invalid_price(self):
        with pytest.raises(SpreadsheetError) as exc_info:
            group_import_rows([{"name": "Tee", "price": "cheap"}])
        assert "Row 1" in str(exc_info.value)


class TestImportRun:
    """Tests for ImportService.import_catalog."""

    def test_imports_products_and_variants(self, store: RemoteStore):
        store.insert("categories", [{"name": "Tops"}])
        progress = []

        result = ImportService(store).import_catalog(
            [
                {"product_id": 1, "name": "Tee", "category": "Tops", "price": 12, "variant_name": "S"},
                {"product_id": 1, "variant_name": "M"},
                {"product_id": 2, "name": "Polo", "category": "Tops"},
            ],
            on_progress=progress.append,
        )

        assert result.success is True
        assert result.products_processed == 2
        assert result.progress == 1.0
        assert progress == [0.5, 1.0]

        tee = store.fetch("products", {"name": "Tee"})[0]
        assert tee["price"] == 12
        assert [v["name"] for v in store.fetch("variants", {"product_id": tee["id"]})] == ["S", "M"]
        assert store.fetch("products", {"name": "Polo"})[0]["price"] == 10

    def test_existing_product_is_reused(self, store: RemoteStore, catalog: dict):
        result = ImportService(store).import_catalog([
            {"name": "Linen Shirt", "category": "Tops", "variant_name": "Yellow"},
        ])

        assert result.success is True
        assert store.count("products", {"name": "Linen Shirt"}) == 1
        assert store.count("variants", {"product_id": catalog["shirt"]}) == 5

    def test_reimport_appends_duplicate_variants(self, store: RemoteStore):
        store.insert("categories", [{"name": "Tops"}])
        rows = [{"name": "Tee", "category": "Tops", "variant_name": "S"}]
        service = ImportService(store)

        service.import_catalog(rows)
        service.import_catalog(rows)

        tee = store.fetch("products", {"name": "Tee"})[0]
        assert store.count("variants", {"product_id": tee["id"]}) == 2

    def test_missing_category_halts(self, store: RemoteStore):
        store.insert("categories", [{"name": "Tops"}])

        result = ImportService(store).import_catalog([
            {"product_id": 1, "name": "Tee", "category": "Tops"},
            {"product_id": 2, "name": "Boot", "category": "Shoes"},
            {"product_id": 3, "name": "Polo", "category": "Tops"},
        ])

        assert result.success is False
        assert result.error == "Category 'Shoes' not found"
        assert result.products_processed == 1
        assert result.total_products == 3
        assert result.partially_applied is True
        assert result.progress == pytest.approx(1 / 3)
        assert store.count("products") == 1

    def test_halt_before_any_write_is_not_partial(self, store: RemoteStore):
        result = ImportService(store).import_catalog([{"name": "Tee", "category": "Nowhere"}])

        assert result.success is False
        assert result.partially_applied is False
        assert result.progress == 0

    def test_store_failure_halts(self, store: RemoteStore):
        store.insert("categories", [{"name": "Tops"}])

        class BrokenVariants(RemoteStore):
            def insert(self, collection, rows):
                if collection == "variants":
                    raise StoreError("variants table offline", StoreError.UNAVAILABLE, collection)
                return super().insert(collection, rows)

        result = ImportService(BrokenVariants()).import_catalog([
            {"name": "Tee", "category": "Tops", "variant_name": "S"},
        ])

        assert result.success is False
        assert "variants table offline" in result.error
        assert result.partially_applied is True
        assert store.count("products") == 1

    def test_no_rows(self, store: RemoteStore):
        result = ImportService(store).import_catalog([])
        assert result.success is False
        assert result.error == "No data found in the file."

    def test_invalid_price_fails_without_writes(self, store: RemoteStore):
        result = ImportService(store).import_catalog([{"name": "Tee", "price": "n/a"}])
        assert result.success is False
        assert store.count("products") == 0


class TestImportJobRetention:
    """Tests for dropping finished jobs from the registry."""

    @pytest.fixture
    def registry(self):
        registry = ImportJobRegistry()
        registry.clear()
        yield registry
        registry.clear()

    def test_old_finished_job_dropped_on_next_job(self, store: RemoteStore, registry: ImportJobRegistry):
        service = ImportService(store, registry=registry)
        old = service.create_job("old.csv")
        registry.update(
            old["id"],
            status=ImportStatus.SUCCEEDED,
            finished_at=datetime.utcnow() - timedelta(hours=2),
        )

        service.create_job("new.csv")

        assert registry.get(old["id"]) is None

    def test_unfinished_and_recent_jobs_are_kept(self, registry: ImportJobRegistry):
        pending = registry.create("pending.csv")
        recent = registry.create("recent.csv")
        registry.update(recent["id"], status=ImportStatus.FAILED, finished_at=datetime.utcnow())

        dropped = registry.prune(timedelta(minutes=60))

        assert dropped == 0
        assert registry.get(pending["id"]) is not None
        assert registry.get(recent["id"]) is not None

    def test_prune_uses_given_clock(self, registry: ImportJobRegistry):
        job = registry.create("done.csv")
        finished = datetime(2024, 1, 1, 12, 0)
        registry.update(job["id"], status=ImportStatus.SUCCEEDED, finished_at=finished)

        assert registry.prune(timedelta(minutes=30), now=finished + timedelta(minutes=10)) == 0
        assert registry.prune(timedelta(minutes=30), now=finished + timedelta(minutes=31)) == 1
        assert registry.get(job["id"]) is None

    def test_unexpected_error_fails_job(self, store: RemoteStore, registry: ImportJobRegistry):
        class ExplodingStore(RemoteStore):
            def fetch_one(self, collection, row_id=None, *, filters=None, embed=()):
                raise RuntimeError("boom")

        service = ImportService(ExplodingStore(), registry=registry)
        job = service.create_job("crash.csv")

        with pytest.raises(RuntimeError):
            service.run_job(job["id"], [{"name": "Tee", "category": "Tops"}])

        failed = registry.get(job["id"])
        assert failed["status"] == "failed"
        assert failed["error"] == "Unexpected error: boom"
        assert failed["finished_at"] is not None


class TestImportEndpoints:
    """Tests for import job endpoints."""

    def test_upload_runs_job(self, client: TestClient, admin_headers: dict, catalog: dict, store: RemoteStore):
        content = make_xlsx([
            HEADER,
            [201, "Denim Jacket", "Tops", "jacket.jpg", 79, "Indigo", None],
            [201, None, None, None, None, "Black", None],
        ])

        response = client.post(
            "/api/v1/imports",
            headers=admin_headers,
            files={"file": ("catalog.xlsx", content, "application/octet-stream")}
        )

        assert response.status_code == 202
        job = response.json()["job"]
        assert job["filename"] == "catalog.xlsx"

        status = client.get(f"/api/v1/imports/{job['id']}", headers=admin_headers)
        assert status.status_code == 200
        finished = status.json()["job"]
        assert finished["status"] == ImportStatus.SUCCEEDED.value
        assert finished["progress"] == 100
        assert finished["total_products"] == 1

        jacket = store.fetch("products", {"name": "Denim Jacket"})[0]
        assert jacket["category_id"] == catalog["tops"]
        assert store.count("variants", {"product_id": jacket["id"]}) == 2

    def test_failed_job_reports_error(self, client: TestClient, admin_headers: dict):
        content = make_csv([["name", "category"], ["Tee", "Unknown"]])

        response = client.post(
            "/api/v1/imports",
            headers=admin_headers,
            files={"file": ("catalog.csv", content, "text/csv")}
        )
        job_id = response.json()["job"]["id"]

        job = client.get(f"/api/v1/imports/{job_id}", headers=admin_headers).json()["job"]
        assert job["status"] == ImportStatus.FAILED.value
        assert job["error"] == "Category 'Unknown' not found"
        assert job["partially_applied"] is False

    def test_unsupported_file_rejected(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/v1/imports",
            headers=admin_headers,
            files={"file": ("catalog.txt", b"name\nTee\n", "text/plain")}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_IMPORT_FILE"

    def test_empty_file_rejected(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/v1/imports",
            headers=admin_headers,
            files={"file": ("catalog.csv", b"name,price\n", "text/csv")}
        )
        assert response.status_code == 400

    def test_unknown_job(self, client: TestClient, admin_headers: dict):
        response = client.get("/api/v1/imports/missing", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "IMPORT_NOT_FOUND"

    def test_upload_requires_auth(self, client: TestClient):
        response = client.post(
            "/api/v1/imports",
            files={"file": ("catalog.csv", b"name\nTee\n", "text/csv")}
        )
        assert response.status_code == 401
