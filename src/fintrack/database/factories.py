"""Factory functions for creating blob store instances."""

from typing import Optional

from fintrack.config import get_db_path
from fintrack.database.sqlalchemy_store import SQLAlchemyBlobStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyBlobStore:
    """Create a SQLite-backed blob store.

    Args:
        database_path: Path to SQLite database file. If None, checks FINTRACK_DB_PATH
            environment variable, then defaults to ~/.fintrack/fintrack.db

    Returns:
        SQLAlchemyBlobStore instance configured for SQLite
    """
    database_url = f"sqlite:///{get_db_path(database_path)}"
    return SQLAlchemyBlobStore(database_url)
