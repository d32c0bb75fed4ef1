"""SQLite-backed persistence for the product record set."""

from .products import ProductStore
from .schema import ensure_schema
from .store import KeyValueStore, StorageError

__all__ = [
    "KeyValueStore",
    "ProductStore",
    "StorageError",
    "ensure_schema",
]
