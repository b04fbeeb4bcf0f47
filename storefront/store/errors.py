"""
==============================================================================
Remote Store Errors
==============================================================================

StoreError is the only exception the remote store client raises. Callers
branch on its ``code`` rather than on SQLAlchemy exception types.

Codes:
------
- not_found      single-row fetch or update matched no row
- multiple_rows  single-row fetch matched more than one row
- conflict       constraint violation (unique name, foreign key in use)
- invalid        unknown collection, column or embed
- unavailable    any other database failure

==============================================================================
"""

from __future__ import annotations

from typing import Optional


class StoreError(Exception):
    """Failure reported by the remote store client."""

    NOT_FOUND = "not_found"
    MULTIPLE_ROWS = "multiple_rows"
    CONFLICT = "conflict"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"

    def __init__(self, message: str, code: str = UNAVAILABLE, collection: Optional[str] = None):
        self.message = message
        self.code = code
        self.collection = collection
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.code == self.NOT_FOUND

    def __repr__(self) -> str:
        return f"StoreError(code={self.code!r}, collection={self.collection!r}, message={self.message!r})"
