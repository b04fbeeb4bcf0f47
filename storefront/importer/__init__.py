"""
==============================================================================
Importer Package - Bulk Catalog Import
==============================================================================

Spreadsheet parsing and row grouping for the bulk import. The store
writes happen in storefront.services.import_service.

==============================================================================
"""

from .spreadsheet import SUPPORTED_EXTENSIONS, SpreadsheetError, read_spreadsheet, rows_from_table
from .models import ImportProduct, ImportResult, ImportVariant
from .grouping import group_import_rows

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SpreadsheetError",
    "read_spreadsheet",
    "rows_from_table",
    "ImportProduct",
    "ImportResult",
    "ImportVariant",
    "group_import_rows",
]
