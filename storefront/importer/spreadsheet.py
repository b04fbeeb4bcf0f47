"""
==============================================================================
Spreadsheet Reader Module
==============================================================================

Turns an uploaded catalog spreadsheet into a list of row dicts.

Layout:
------
The first non-empty row of the first sheet holds the column headers; every
later row is one record. Recognised columns:

    product_id | name | category | image_url | price |
    variant_name | variant_image_url

Other columns are carried along and ignored by the grouping step. Empty
cells are left out of the row dict, and rows with no values at all are
skipped.

Formats:
-------
- .xlsx  via openpyxl (cached cell values, not formulas)
- .csv   via the csv module, UTF-8 with optional BOM

==============================================================================
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException


# Module logger
logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".csv")

Row = Dict[str, Any]


class SpreadsheetError(ValueError):
    """Uploaded file cannot be read as a catalog spreadsheet."""


def _clean_cell(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _normalize_header(value: Any) -> str:
    return " ".join(str(value or "").strip().lower().split()).replace(" ", "_")


def rows_from_table(table: Iterable[Sequence[Any]]) -> List[Row]:
    """
    Build row dicts from a header row followed by value rows.

    Args:
        table: Iterable of cell sequences (header first)

    Returns:
        One dict per non-empty value row
    """
    headers: Optional[List[str]] = None
    rows: List[Row] = []

    for cells in table:
        cleaned = [_clean_cell(cell) for cell in cells]

        if headers is None:
            if any(cell is not None for cell in cleaned):
                headers = [_normalize_header(cell) for cell in cleaned]
            continue

        row = {
            header: value
            for header, value in zip(headers, cleaned)
            if header and value is not None
        }
        if row:
            rows.append(row)

    return rows


def read_xlsx(content: bytes) -> List[Row]:
    """Read the first worksheet of an .xlsx workbook."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as e:
        raise SpreadsheetError(f"Could not open workbook: {e}") from e

    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        return rows_from_table(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def read_csv(content: bytes) -> List[Row]:
    """Read a UTF-8 comma-separated file."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SpreadsheetError("CSV file is not valid UTF-8") from e

    try:
        return rows_from_table(csv.reader(io.StringIO(text)))
    except csv.Error as e:
        raise SpreadsheetError(f"Malformed CSV: {e}") from e


def read_spreadsheet(filename: str, content: bytes) -> List[Row]:
    """
    Parse an uploaded spreadsheet by file extension.

    Args:
        filename: Original upload name (extension selects the reader)
        content: Raw file bytes

    Returns:
        Row dicts in sheet order

    Raises:
        SpreadsheetError: unsupported extension or unreadable content
    """
    extension = PurePath(filename or "").suffix.lower()

    if extension == ".xlsx":
        rows = read_xlsx(content)
    elif extension == ".csv":
        rows = read_csv(content)
    else:
        raise SpreadsheetError(
            f"Unsupported file type '{extension or filename}'. "
            f"Upload one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    logger.info(f"📄 Read {len(rows)} row(s) from {filename}")
    return rows
