"""Database layer for fintrack application."""

from fintrack.database.base import BlobStore
from fintrack.database.factories import create_sqlite_store
from fintrack.database.persistence import StorePersistence

__all__ = ["BlobStore", "create_sqlite_store", "StorePersistence"]
