"""
==============================================================================
Import Schemas Module
==============================================================================

Response schemas for bulk import jobs.

==============================================================================
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ImportJobInfo(BaseModel):
    """
    Import job state.

    ``progress`` is a whole percentage of products completed. A failed job
    keeps the progress of its last completed product.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: str
    status: str
    progress: int = Field(ge=0, le=100)
    products_processed: int = 0
    total_products: int = 0
    error: Optional[str] = None
    partially_applied: bool = False
    created_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


class ImportJobResponse(BaseModel):
    """Single import job response."""
    success: bool = Field(default=True)
    job: ImportJobInfo
