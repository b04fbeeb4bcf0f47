"""
==============================================================================
Remote Store Client
==============================================================================

Generic query/mutation client over the catalog tables.

Every public call is one independent request: it opens its own session,
commits on success and closes. There is no transaction spanning two
calls; a caller issuing several writes gets exactly the partial-completion
semantics of a hosted REST data API. That is what the import pipeline and
the reorder fan-out rely on.

Rows go in and come out as plain dicts keyed by column name. Products can
embed their category (a dict or None) and their variants (a list of
dicts):

    store.fetch("products", embed=("category", "variants"))
    store.fetch_one("categories", filters={"name": "Shoes"})
    store.insert("variants", [{"product_id": pid, "name": "S"}])
    store.update("variants", vid, {"position": 2})
    store.delete("variants", filters={"product_id": pid})

Filters are equality matches; a list/tuple/set value becomes IN, and None
becomes IS NULL.

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.db.database import get_database_manager
from storefront.db.models import Category, Product, Variant
from storefront.store.errors import StoreError


# Module logger
logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class RemoteStore:
    """
    Remote data client for the products, categories and variants collections.

    Attributes:
        COLLECTIONS: collection name -> ORM model
        EMBEDS: collection name -> relations that may be embedded

    Example:
        >>> store = RemoteStore()
        >>> rows = store.fetch("variants", filters={"product_id": pid})
    """

    COLLECTIONS = {
        "products": Product,
        "categories": Category,
        "variants": Variant,
    }

    EMBEDS = {
        "products": ("category", "variants"),
    }

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None) -> None:
        self._session_factory = session_factory or get_database_manager().session_factory

    # =========================================================================
    # REQUEST SCOPE
    # =========================================================================

    @contextmanager
    def _request(self, collection: str) -> Generator[Session, None, None]:
        """One session per call; SQLAlchemy errors become StoreError."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except StoreError:
            session.rollback()
            raise
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Store conflict on {collection}: {e.orig}")
            raise StoreError(str(e.orig), StoreError.CONFLICT, collection) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Store request on {collection} failed: {e}")
            raise StoreError(str(e), StoreError.UNAVAILABLE, collection) from e
        finally:
            session.close()

    # =========================================================================
    # INTROSPECTION HELPERS
    # =========================================================================

    def _model(self, collection: str):
        try:
            return self.COLLECTIONS[collection]
        except KeyError:
            raise StoreError(f"Unknown collection '{collection}'", StoreError.INVALID, collection) from None

    @staticmethod
    def _column_names(model) -> List[str]:
        return [column.key for column in model.__table__.columns]

    def _column(self, model, name: str, collection: str):
        if name not in self._column_names(model):
            raise StoreError(
                f"Unknown column '{name}' on {collection}",
                StoreError.INVALID,
                collection,
            )
        return getattr(model, name)

    def _where(self, stmt, model, collection: str, filters: Optional[Mapping[str, Any]]):
        for name, value in (filters or {}).items():
            column = self._column(model, name, collection)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _check_embed(self, collection: str, embed: Iterable[str]) -> Sequence[str]:
        embed = tuple(embed)
        allowed = self.EMBEDS.get(collection, ())
        for name in embed:
            if name not in allowed:
                raise StoreError(
                    f"Cannot embed '{name}' in {collection}",
                    StoreError.INVALID,
                    collection,
                )
        return embed

    def _to_row(self, obj, embed: Sequence[str] = ()) -> Row:
        row = {name: getattr(obj, name) for name in self._column_names(type(obj))}
        for name in embed:
            related = getattr(obj, name)
            if isinstance(related, list):
                row[name] = [self._to_row(item) for item in related]
            else:
                row[name] = self._to_row(related) if related is not None else None
        return row

    def _clean_fields(self, model, collection: str, fields: Mapping[str, Any]) -> Row:
        for name in fields:
            self._column(model, name, collection)
        return dict(fields)

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def fetch(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        embed: Iterable[str] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Row]:
        """
        Fetch rows matching the filters.

        Args:
            collection: products, categories or variants
            filters: column -> value equality filters
            embed: relations to embed (products only)
            order_by: column name, prefixed with '-' for descending
            limit: maximum rows
            offset: rows to skip

        Returns:
            List of row dicts in store order (or order_by order)

        Raises:
            StoreError: on unknown names or database failure
        """
        model = self._model(collection)
        embed = self._check_embed(collection, embed)

        stmt = self._where(select(model), model, collection, filters)
        for name in embed:
            stmt = stmt.options(selectinload(getattr(model, name)))
        if order_by:
            column = self._column(model, order_by.lstrip("-"), collection)
            stmt = stmt.order_by(column.desc() if order_by.startswith("-") else column)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._request(collection) as session:
            objects = session.scalars(stmt).all()
            return [self._to_row(obj, embed) for obj in objects]

    def fetch_one(
        self,
        collection: str,
        row_id: Optional[str] = None,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        embed: Iterable[str] = (),
    ) -> Row:
        """
        Fetch exactly one row by id and/or filters.

        Raises:
            StoreError: code 'not_found' when nothing matches,
                'multiple_rows' when more than one row matches
        """
        criteria = dict(filters or {})
        if row_id is not None:
            criteria["id"] = row_id

        rows = self.fetch(collection, criteria, embed=embed, limit=2)

        if not rows:
            raise StoreError(f"No {collection} row matches {criteria}", StoreError.NOT_FOUND, collection)
        if len(rows) > 1:
            raise StoreError(
                f"More than one {collection} row matches {criteria}",
                StoreError.MULTIPLE_ROWS,
                collection,
            )
        return rows[0]

    def count(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count rows matching the filters."""
        model = self._model(collection)
        stmt = self._where(select(func.count()).select_from(model), model, collection, filters)

        with self._request(collection) as session:
            return int(session.scalar(stmt) or 0)

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def insert(self, collection: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        """
        Insert rows in one request.

        Returns:
            The inserted rows, including generated ids and defaults
        """
        model = self._model(collection)
        if not rows:
            return []

        objects = [model(**self._clean_fields(model, collection, row)) for row in rows]

        with self._request(collection) as session:
            session.add_all(objects)
            session.flush()
            inserted = [self._to_row(obj) for obj in objects]

        logger.debug(f"Inserted {len(inserted)} row(s) into {collection}")
        return inserted

    def update(self, collection: str, row_id: str, fields: Mapping[str, Any]) -> Row:
        """
        Update one row by id with a partial set of fields.

        The write is a single UPDATE statement so concurrent rank writes
        never read-then-write.

        Returns:
            The row after the update

        Raises:
            StoreError: 'not_found' if no row has this id
        """
        model = self._model(collection)
        values = self._clean_fields(model, collection, fields)
        values.pop("id", None)

        with self._request(collection) as session:
            if values:
                result = session.execute(
                    sa_update(model)
                    .where(model.id == row_id)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise StoreError(f"No {collection} row with id {row_id}", StoreError.NOT_FOUND, collection)
            obj = session.get(model, row_id)
            if obj is None:
                raise StoreError(f"No {collection} row with id {row_id}", StoreError.NOT_FOUND, collection)
            return self._to_row(obj)

    def delete(
        self,
        collection: str,
        row_id: Optional[str] = None,
        *,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """
        Delete rows by id or filters.

        Returns:
            Number of rows deleted (0 is not an error)

        Raises:
            StoreError: 'invalid' when called without id or filters
        """
        model = self._model(collection)
        criteria = dict(filters or {})
        if row_id is not None:
            criteria["id"] = row_id
        if not criteria:
            raise StoreError(f"Refusing to delete all {collection}", StoreError.INVALID, collection)

        stmt = self._where(sa_delete(model), model, collection, criteria)

        with self._request(collection) as session:
            result = session.execute(stmt.execution_options(synchronize_session=False))
            deleted = result.rowcount

        logger.debug(f"Deleted {deleted} row(s) from {collection}")
        return deleted


def get_store() -> RemoteStore:
    """FastAPI dependency providing the remote store client."""
    return RemoteStore()
