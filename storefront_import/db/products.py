from __future__ import annotations

import logging
from typing import Any, Protocol

from psycopg2 import sql

from ..models.product_record import ProductRecord

"""Product persistence: upsert keyed by barcode, plus listing.

Upserts are issued one row at a time with no transaction spanning rows; the
connection is expected to be in autocommit mode (see cli._connect) so a
rejected row does not abort the ones after it.

InMemoryProductRepository backs the CLI mock mode (no database) and tests.
"""

__all__ = [
    "PersistenceError",
    "ProductRepository",
    "PostgresProductRepository",
    "InMemoryProductRepository",
]

logger = logging.getLogger(__name__)

# table columns (camelCase, quoted)
PRODUCT_COLUMNS = ["barcode", "productName", "price", "color", "description", "imageUrl"]


class PersistenceError(Exception):
    """Raised when the store rejects or fails a single product operation."""


class ProductRepository(Protocol):
    def upsert_product(self, record: ProductRecord) -> None: ...

    def list_products(self) -> list[ProductRecord]: ...


class PostgresProductRepository:
    """ProductRepository over a psycopg2 cursor."""

    def __init__(self, cursor: Any, table: str = "products") -> None:
        self.cursor = cursor
        self.table = table

    def _upsert_sql(self) -> sql.Composed:
        cols = sql.SQL(", ").join(sql.Identifier(c) for c in PRODUCT_COLUMNS)
        placeholders = sql.SQL(", ").join(sql.Placeholder() for _ in PRODUCT_COLUMNS)
        updates = sql.SQL(", ").join(
            sql.SQL("{col} = EXCLUDED.{col}").format(col=sql.Identifier(c))
            for c in PRODUCT_COLUMNS
            if c != "barcode"
        )
        return sql.SQL(
            "INSERT INTO {table} ({cols}) VALUES ({values}) "
            "ON CONFLICT ({key}) DO UPDATE SET {updates}, {updated_at} = now()"
        ).format(
            table=sql.Identifier(self.table),
            cols=cols,
            values=placeholders,
            key=sql.Identifier("barcode"),
            updates=updates,
            updated_at=sql.Identifier("updatedAt"),
        )

    def upsert_product(self, record: ProductRecord) -> None:
        """Insert the product, or replace the existing row with the same barcode."""
        params = (
            record.barcode,
            record.product_name,
            record.price,
            record.color,
            record.description,
            record.image_url,
        )
        try:
            self.cursor.execute(self._upsert_sql(), params)
        except Exception as e:
            raise PersistenceError(str(e)) from e
        logger.debug("upserted barcode=%s table=%s", record.barcode, self.table)

    def list_products(self) -> list[ProductRecord]:
        """All stored products ordered by barcode."""
        query = sql.SQL("SELECT {cols} FROM {table} ORDER BY {key}").format(
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in PRODUCT_COLUMNS),
            table=sql.Identifier(self.table),
            key=sql.Identifier("barcode"),
        )
        try:
            self.cursor.execute(query)
            fetched = self.cursor.fetchall()
        except Exception as e:
            raise PersistenceError(f"failed listing products: {e}") from e
        # price comes back as Decimal from the numeric column; from_dict renders it as text
        return [ProductRecord.from_dict(dict(zip(PRODUCT_COLUMNS, row))) for row in fetched]


class InMemoryProductRepository:
    """Dict-backed ProductRepository keyed by barcode (first-insert order kept)."""

    def __init__(self) -> None:
        self._products: dict[str, ProductRecord] = {}

    def upsert_product(self, record: ProductRecord) -> None:
        self._products[record.barcode] = record

    def list_products(self) -> list[ProductRecord]:
        return list(self._products.values())

    def __len__(self) -> int:
        return len(self._products)
