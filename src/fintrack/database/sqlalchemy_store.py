"""Generic SQLAlchemy blob store implementation."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.database.base import BlobStore
from fintrack.database.models import Blob, create_session_factory
from fintrack.domain.errors import StorageError

logger = logging.getLogger(__name__)


class SQLAlchemyBlobStore(BlobStore):
    """SQLAlchemy-based implementation of BlobStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy blob store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')

        Raises:
            StorageError: If the database cannot be opened or its table created
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not open database {database_url}: {e}") from e
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def load(self, key: str) -> Optional[str]:
        session = self._get_session()
        try:
            # Another process may have written since this session last read
            blob = session.get(Blob, key, populate_existing=True)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read '{key}': {e}") from e
        if blob is None:
            return None
        return blob.payload

    def save(self, key: str, payload: str) -> None:
        session = self._get_session()
        try:
            blob = session.get(Blob, key)
            if blob is None:
                session.add(Blob(key=key, payload=payload))
            else:
                blob.payload = payload
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Could not write '{key}': {e}") from e
        logger.debug("Saved %d characters under %s", len(payload), key)

    def delete(self, key: str) -> None:
        session = self._get_session()
        try:
            blob = session.get(Blob, key)
            if blob is not None:
                session.delete(blob)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Could not delete '{key}': {e}") from e
