"""
==============================================================================
Bulk Import Service Module
==============================================================================

Imports a catalog spreadsheet into the remote store.

Import Flow (per grouped product, in order):
-------------------------------------------
    ┌──────────────────┐     ┌─────────────┐
    │ Category by name │────▶│  Missing    │ → halt
    └────────┬─────────┘     └─────────────┘
    ┌────────▼─────────┐
    │ Product by name  │  reuse the first match, else insert
    └────────┬─────────┘
    ┌────────▼─────────┐
    │ Insert variants  │  one batch request (skipped when none)
    └────────┬─────────┘
    ┌────────▼─────────┐
    │ Report progress  │  processed / total
    └──────────────────┘

Any store error halts the run. Products already written stay written;
there is no rollback and no retry.

Jobs:
----
An upload becomes an ImportJob held in the in-process ImportJobRegistry
and runs as a FastAPI background task. Clients poll the job for progress.
Finished jobs are dropped once they are older than
import_job_retention_minutes, checked whenever a new job is queued.

==============================================================================
"""

from __future__ import annotations

import enum
import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from storefront.config import Settings, get_settings
from storefront.core import exceptions
from storefront.importer import (
    ImportProduct,
    ImportResult,
    SpreadsheetError,
    group_import_rows,
    read_spreadsheet,
)
from storefront.store import RemoteStore, StoreError


# Module logger
logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class ImportHalted(Exception):
    """Stops an import run at the current product."""


# =============================================================================
# IMPORT JOBS
# =============================================================================

class ImportStatus(str, enum.Enum):
    """
    Import job lifecycle.

        PENDING → RUNNING → SUCCEEDED
                          ↘ FAILED
    """
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImportJob:
    """State of one uploaded import."""

    def __init__(self, filename: str) -> None:
        self.id = str(uuid.uuid4())
        self.filename = filename
        self.status = ImportStatus.PENDING
        self.progress = 0.0
        self.products_processed = 0
        self.total_products = 0
        self.error: Optional[str] = None
        self.partially_applied = False
        self.created_at = datetime.utcnow()
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "status": self.status.value,
            "progress": round(self.progress * 100),
            "products_processed": self.products_processed,
            "total_products": self.total_products,
            "error": self.error,
            "partially_applied": self.partially_applied,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }

    def __repr__(self) -> str:
        return f"ImportJob(id={self.id!r}, status={self.status.value}, progress={self.progress:.2f})"


class ImportJobRegistry:
    """
    In-process registry of import jobs (singleton).

    Jobs are updated from background worker threads and read by request
    handlers, so every access goes through one lock and readers get a
    snapshot dict.
    """

    _instance: Optional[ImportJobRegistry] = None

    def __new__(cls) -> ImportJobRegistry:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, '_initialized', False):
            return

        self._jobs: Dict[str, ImportJob] = {}
        self._lock = threading.Lock()
        self._initialized = True

    def create(self, filename: str) -> Dict[str, Any]:
        job = ImportJob(filename)
        with self._lock:
            self._jobs[job.id] = job
            return job.to_dict()

    def get(self, job_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.to_dict() if job else None

    def update(self, job_id: str, **fields: Any) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return
            for name, value in fields.items():
                setattr(job, name, value)

    def prune(self, max_age: timedelta, now: Optional[datetime] = None) -> int:
        """Drop jobs that finished more than ``max_age`` ago; returns how many."""
        cutoff = (now or datetime.utcnow()) - max_age
        with self._lock:
            expired = [
                job_id for job_id, job in self._jobs.items()
                if job.finished_at is not None and job.finished_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()


def get_import_registry() -> ImportJobRegistry:
    return ImportJobRegistry()


# =============================================================================
# IMPORT SERVICE
# =============================================================================

class ImportService:
    """
    Bulk catalog import.

    Attributes:
        _store: Remote store client
        _settings: Import defaults (category, price)
        _registry: Job registry for uploaded imports

    Example:
        >>> service = ImportService(RemoteStore())
        >>> result = service.import_catalog(rows, on_progress=print)
        >>> result.success, result.progress
        (True, 1.0)
    """

    def __init__(
        self,
        store: RemoteStore,
        settings: Optional[Settings] = None,
        registry: Optional[ImportJobRegistry] = None,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._registry = registry or get_import_registry()

    # =========================================================================
    # STORE STEPS
    # =========================================================================

    def _resolve_category(self, name: str) -> str:
        try:
            return self._store.fetch_one("categories", filters={"name": name})["id"]
        except StoreError as e:
            if e.is_not_found:
                raise ImportHalted(f"Category '{name}' not found") from e
            raise ImportHalted(f"Error finding category '{name}': {e.message}") from e

    def _find_existing_product(self, name: str) -> Optional[str]:
        try:
            matches = self._store.fetch("products", {"name": name}, limit=1)
        except StoreError as e:
            raise ImportHalted(f"Error checking product '{name}': {e.message}") from e
        return matches[0]["id"] if matches else None

    def _insert_product(self, product: ImportProduct, category_id: str) -> str:
        try:
            row = self._store.insert("products", [{
                "name": product.name,
                "category_id": category_id,
                "image_url": product.image_url,
                "price": product.price,
            }])[0]
        except StoreError as e:
            raise ImportHalted(f"Error creating product '{product.name}': {e.message}") from e
        return row["id"]

    def _insert_variants(self, product: ImportProduct, product_id: str) -> None:
        try:
            self._store.insert("variants", [
                {"product_id": product_id, "name": variant.name, "image_url": variant.image_url}
                for variant in product.variants
            ])
        except StoreError as e:
            raise ImportHalted(
                f"Error creating variants for '{product.name}': {e.message}"
            ) from e

    # =========================================================================
    # IMPORT RUN
    # =========================================================================

    def import_catalog(
        self,
        rows: Sequence[Mapping[str, Any]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """
        Import spreadsheet rows into the store.

        Args:
            rows: Row dicts (header names as keys)
            on_progress: Called with the completed fraction after each product

        Returns:
            ImportResult; never raises for store or data errors
        """
        try:
            products = group_import_rows(
                rows,
                default_category=self._settings.import_default_category,
                default_price=self._settings.import_default_price,
            )
        except SpreadsheetError as e:
            return ImportResult(success=False, error=str(e))

        total = len(products)
        if not total:
            return ImportResult(success=False, error="No data found in the file.")

        processed = 0
        wrote = False
        logger.info(f"📦 Importing {total} product(s)")

        for product in products:
            try:
                category_id = self._resolve_category(product.category)

                product_id = self._find_existing_product(product.name)
                if product_id is None:
                    product_id = self._insert_product(product, category_id)
                    wrote = True
                else:
                    logger.debug(f"Reusing existing product '{product.name}' ({product_id})")

                if product.variants:
                    self._insert_variants(product, product_id)
                    wrote = True

            except ImportHalted as e:
                logger.error(f"❌ Import halted at product {processed + 1}/{total}: {e}")
                return ImportResult(
                    success=False,
                    error=str(e),
                    partially_applied=wrote,
                    products_processed=processed,
                    total_products=total,
                    progress=processed / total,
                )

            processed += 1
            if on_progress is not None:
                on_progress(processed / total)

        logger.info(f"✅ Import complete: {processed} product(s)")
        return ImportResult(
            success=True,
            products_processed=processed,
            total_products=total,
            progress=1.0,
        )

    # =========================================================================
    # JOBS
    # =========================================================================

    def create_job(self, filename: str) -> Dict[str, Any]:
        """Register a pending job for an uploaded file."""
        pruned = self._registry.prune(
            timedelta(minutes=self._settings.import_job_retention_minutes)
        )
        if pruned:
            logger.debug(f"Dropped {pruned} finished import job(s)")

        job = self._registry.create(filename)
        logger.info(f"📥 Import job {job['id']} queued for {filename}")
        return job

    @staticmethod
    def parse_upload(filename: str, content: bytes) -> List[Dict[str, Any]]:
        """
        Raises:
            AppException: INVALID_IMPORT_FILE for unreadable or empty files
        """
        try:
            rows = read_spreadsheet(filename, content)
        except SpreadsheetError as e:
            raise exceptions.invalid_import_file(str(e)) from e

        if not rows:
            raise exceptions.invalid_import_file("No data found in the file.")
        return rows

    def run_job(self, job_id: str, rows: Sequence[Mapping[str, Any]]) -> ImportResult:
        """Run an import for a registered job and record the outcome on it."""
        self._registry.update(job_id, status=ImportStatus.RUNNING, started_at=datetime.utcnow())

        try:
            result = self.import_catalog(
                rows, on_progress=lambda fraction: self._registry.update(job_id, progress=fraction)
            )
        except Exception as e:
            logger.exception(f"Import job {job_id} crashed")
            self._registry.update(
                job_id,
                status=ImportStatus.FAILED,
                error=f"Unexpected error: {e}",
                finished_at=datetime.utcnow(),
            )
            raise

        self._registry.update(
            job_id,
            status=ImportStatus.SUCCEEDED if result.success else ImportStatus.FAILED,
            progress=result.progress,
            products_processed=result.products_processed,
            total_products=result.total_products,
            error=result.error,
            partially_applied=result.partially_applied,
            finished_at=datetime.utcnow(),
        )
        return result

    def get_job(self, job_id: str) -> Dict[str, Any]:
        job = self._registry.get(job_id)
        if job is None:
            raise exceptions.import_not_found(job_id)
        return job
