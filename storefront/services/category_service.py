"""
==============================================================================
Category Service Module
==============================================================================

Category CRUD over the remote store.

Categories are referenced by products; deleting one that is still in use
is refused by the store and reported as CONFLICT. The bulk import looks
categories up by exact name and never creates them.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from storefront.core import exceptions
from storefront.schemas.catalog import CategoryCreate, CategoryUpdate
from storefront.store import RemoteStore, StoreError

from .store_errors import translate_store_error


# Module logger
logger = logging.getLogger(__name__)


class CategoryService:
    """
    Category management.

    Example:
        >>> service = CategoryService(RemoteStore())
        >>> category = service.create_category(CategoryCreate(name="Shoes"))
        >>> service.list_categories()
    """

    def __init__(self, store: RemoteStore) -> None:
        self._store = store

    def list_categories(self) -> List[Dict[str, Any]]:
        """All categories, by name."""
        try:
            return self._store.fetch("categories", order_by="name")
        except StoreError as e:
            raise translate_store_error(e) from e

    def get_category(self, category_id: str) -> Dict[str, Any]:
        try:
            return self._store.fetch_one("categories", category_id)
        except StoreError as e:
            raise translate_store_error(e, exceptions.category_not_found(category_id)) from e

    def create_category(self, data: CategoryCreate) -> Dict[str, Any]:
        try:
            category = self._store.insert("categories", [data.model_dump()])[0]
        except StoreError as e:
            raise translate_store_error(
                e, conflict_message=f"Category '{data.name}' already exists"
            ) from e

        logger.info(f"✅ Category created: {category['name']}")
        return category

    def update_category(self, category_id: str, data: CategoryUpdate) -> Dict[str, Any]:
        fields = data.model_dump(exclude_unset=True)
        if "name" in fields and fields["name"] is None:
            fields.pop("name")

        try:
            category = self._store.update("categories", category_id, fields)
        except StoreError as e:
            raise translate_store_error(
                e,
                exceptions.category_not_found(category_id),
                conflict_message=f"Category '{fields.get('name')}' already exists",
            ) from e

        logger.info(f"✏️ Category updated: {category['name']}")
        return category

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        """
        Delete a category no product references.

        Raises:
            AppException: CATEGORY_NOT_FOUND, or CONFLICT while in use
        """
        category = self.get_category(category_id)

        try:
            self._store.delete("categories", category_id)
        except StoreError as e:
            raise translate_store_error(
                e, conflict_message=f"Category '{category['name']}' is still used by products"
            ) from e

        logger.info(f"🗑️ Category deleted: {category['name']}")
        return category
