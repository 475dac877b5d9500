"""Persistence collaborators for product records."""

from .products import (
    InMemoryProductRepository,
    PersistenceError,
    PostgresProductRepository,
    ProductRepository,
)

__all__ = [
    "InMemoryProductRepository",
    "PersistenceError",
    "PostgresProductRepository",
    "ProductRepository",
]
