"""
catalog/store.py -- SQLAlchemy-backed persistence layer for products.

Pattern: Repository + Data Mapper. ProductRepository is the contract route
handlers depend on; ProductStore is the durable implementation and
_row_to_product is the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. The sort direction is mapped
through a closed vocabulary to SQLAlchemy's asc()/desc(), never interpolated.

Storage layout:
  id          -- canonical identifier string (primary key)
  price       -- Decimal serialized with str(); exact, no float rounding
  created_at  -- UTC ISO 8601 with fixed microsecond precision, so
                 lexicographic order in the database equals time order

Concurrency: update() and delete() check existence, then write. The two steps
are not atomic; a concurrent delete landing in between shows up as
StorageError (zero rows affected) rather than NotFound.

Usage:
    store = ProductStore("sqlite:///catalogapi.db")
    store.create(Product.new("Keyboard", "49.90"))
    page = store.find_all(page=2, limit=10, sort="desc")
    store.close()
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from sqlalchemy import Column, MetaData, String, Table, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from catalog.models import Product
from core.database import make_engine
from core.errors import NotFound, StorageError
from core.identifier import Identifier, parse_id

logger = logging.getLogger("catalogapi.catalog.store")

SORT_DIRECTIONS: frozenset[str] = frozenset({"asc", "desc"})
DEFAULT_SORT = "asc"

# SQLite binds OFFSET and LIMIT as signed 64-bit integers.
_SQL_INT_MAX = 2**63 - 1

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("price", String(40), nullable=False),
    Column("created_at", String(32), nullable=False, index=True),
)


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class ProductRepository(Protocol):
    def create(self, product: Product) -> None: ...

    def find_by_id(self, product_id: Identifier) -> Product: ...

    def update(self, product: Product) -> None: ...

    def delete(self, product_id: Identifier) -> None: ...

    def find_all(self, page: int, limit: int, sort: str) -> list[Product]: ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def normalize_sort(sort: str | None) -> str:
    """Coerce anything outside {"asc", "desc"} (including "" and None) to "asc"."""
    return sort if sort in SORT_DIRECTIONS else DEFAULT_SORT


def page_window(page: int, limit: int) -> tuple[int, int] | None:
    """Return (offset, limit) for a 1-indexed page, or None for "everything".

    Pagination is opt-in: page 0 or limit 0 (or a negative value for either)
    means the caller wants the full ordered set.
    """
    if page <= 0 or limit <= 0:
        return None
    return (page - 1) * limit, limit


def _iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductStore:
    """Durable ProductRepository backed by SQLAlchemy Core."""

    def __init__(self, db_url: str, **engine_kwargs) -> None:
        self.engine: Engine = make_engine(db_url, **engine_kwargs)
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not initialize products table: {type(exc).__name__}") from exc

    def create(self, product: Product) -> None:
        """Insert a product. id and created_at are already set on the entity."""
        self._write(
            _products.insert().values(
                id=str(product.id),
                name=product.name,
                price=str(product.price),
                created_at=_iso(product.created_at),
            ),
            "insert",
        )

    def find_by_id(self, product_id: Identifier) -> Product:
        """Raises NotFound if no product has this id."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_products.select().where(_products.c.id == str(product_id))).fetchone()
        except SQLAlchemyError as exc:
            logger.error("Product lookup failed: %s", type(exc).__name__)
            raise StorageError() from exc
        if row is None:
            raise NotFound(f"Product {product_id} not found.")
        return _row_to_product(row)

    def update(self, product: Product) -> None:
        """Replace every field of an existing product.

        Never inserts: raises NotFound when the id is unknown.
        """
        self.find_by_id(product.id)
        rowcount = self._write(
            _products.update()
            .where(_products.c.id == str(product.id))
            .values(
                name=product.name,
                price=str(product.price),
                created_at=_iso(product.created_at),
            ),
            "update",
        )
        if rowcount == 0:
            raise StorageError(f"Product {product.id} disappeared before update.")

    def delete(self, product_id: Identifier) -> None:
        """Raises NotFound when the id is unknown."""
        self.find_by_id(product_id)
        rowcount = self._write(_products.delete().where(_products.c.id == str(product_id)), "delete")
        if rowcount == 0:
            raise StorageError(f"Product {product_id} disappeared before delete.")

    def find_all(self, page: int = 0, limit: int = 0, sort: str = DEFAULT_SORT) -> list[Product]:
        """Return products ordered by creation time.

        sort outside {"asc", "desc"} is coerced to "asc". page/limit select a
        1-indexed window; 0 for either returns everything. Pages past the end
        return an empty list.
        Equal timestamps fall back to id order: stable across calls, but not
        creation order.
        """
        direction = normalize_sort(sort)
        if direction == "desc":
            order = (_products.c.created_at.desc(), _products.c.id.desc())
        else:
            order = (_products.c.created_at.asc(), _products.c.id.asc())
        stmt = _products.select().order_by(*order)
        window = page_window(page, limit)
        if window is not None:
            offset, size = window
            if offset > _SQL_INT_MAX:
                return []
            stmt = stmt.offset(offset).limit(min(size, _SQL_INT_MAX))
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).fetchall()
        except SQLAlchemyError as exc:
            logger.error("Product listing failed: %s", type(exc).__name__)
            raise StorageError() from exc
        return [_row_to_product(r) for r in rows]

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def close(self) -> None:
        self.engine.dispose()

    def _write(self, stmt, action: str) -> int:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(stmt)
                conn.commit()
        except SQLAlchemyError as exc:
            logger.error("Product %s failed: %s", action, type(exc).__name__)
            raise StorageError() from exc
        return result.rowcount


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_product(row) -> Product:
    return Product(
        id=parse_id(row.id),
        name=row.name,
        price=Decimal(row.price),
        created_at=datetime.fromisoformat(row.created_at),
    )
