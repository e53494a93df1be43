"""Abstract key-value blob store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStore(ABC):
    """Abstract store of text payloads addressed by key.

    The whole application state is saved as one JSON payload, so the backend
    only needs to read and replace a value.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backend."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backend."""
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the payload stored under key, or None if there is none."""
        pass

    @abstractmethod
    def save(self, key: str, payload: str) -> None:
        """Replace the payload stored under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the payload stored under key, if any."""
        pass
