"""
==============================================================================
Bulk Import Endpoints
==============================================================================

Spreadsheet upload and import job polling.

    POST /imports            multipart file (.xlsx or .csv) → 202 + job
    GET  /imports/{job_id}   job status and progress

The file is parsed before the job is queued, so unreadable or empty files
are rejected right away with INVALID_IMPORT_FILE.

==============================================================================
"""

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from storefront.db.models import User
from storefront.core.dependencies import require_admin
from storefront.services.import_service import ImportService
from storefront.store import RemoteStore, get_store
from storefront.schemas.imports import ImportJobInfo, ImportJobResponse


router = APIRouter(prefix="/imports", tags=["Imports"])


class ImportController:
    """Controller for bulk import operations."""

    def __init__(self, store: RemoteStore):
        self._service = ImportService(store)

    async def start(self, file: UploadFile, background_tasks: BackgroundTasks) -> ImportJobResponse:
        filename = file.filename or ""
        content = await file.read()

        rows = self._service.parse_upload(filename, content)
        job = self._service.create_job(filename)
        background_tasks.add_task(self._service.run_job, job["id"], rows)

        return ImportJobResponse(job=ImportJobInfo.model_validate(job))

    def get(self, job_id: str) -> ImportJobResponse:
        return ImportJobResponse(job=ImportJobInfo.model_validate(self._service.get_job(job_id)))


@router.post("", response_model=ImportJobResponse, status_code=202)
async def start_import(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Catalog spreadsheet (.xlsx or .csv)"),
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Upload a spreadsheet and start an import job (Admin only)."""
    controller = ImportController(store)
    return await controller.start(file, background_tasks)


@router.get("/{job_id}", response_model=ImportJobResponse)
async def get_import(
    job_id: str,
    admin: User = Depends(require_admin),
    store: RemoteStore = Depends(get_store)
):
    """Import job status (Admin only)."""
    controller = ImportController(store)
    return controller.get(job_id)
