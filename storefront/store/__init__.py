"""
==============================================================================
Remote Store Package
==============================================================================

Generic query client over the catalog tables, the single source of truth.

==============================================================================
"""

from .errors import StoreError
from .remote import RemoteStore, get_store

__all__ = [
    "RemoteStore",
    "StoreError",
    "get_store",
]
