"""Load-once, save-on-change persistence for the transaction store."""

import logging
from typing import Callable, Optional

from fintrack.config import BUDGET_ALERTS_KEY, STORAGE_KEY
from fintrack.database.base import BlobStore
from fintrack.database.mappers import alert_states_dumps, alert_states_loads, dumps, loads
from fintrack.domain.budget import BudgetAlertTracker
from fintrack.domain.errors import StorageError
from fintrack.domain.store import LOAD_STATE, Action, StoreState, TransactionStore

logger = logging.getLogger(__name__)


class StorePersistence:
    """Keeps a blob store in step with a TransactionStore.

    The snapshot is loaded once, then every state change writes the full
    snapshot back. A failed write is logged and leaves the in-memory state as
    it is; the next change writes everything again.
    """

    def __init__(self, store: TransactionStore, blob_store: BlobStore, key: str = STORAGE_KEY):
        """Initialize persistence.

        Args:
            store: TransactionStore to load into and watch
            blob_store: Backend holding the serialized snapshot
            key: Key the snapshot is stored under
        """
        self.store = store
        self.blob_store = blob_store
        self.key = key
        self._unsubscribe: Optional[Callable[[], None]] = None

    def load(self) -> StoreState:
        """Load the persisted snapshot into the store.

        A missing snapshot leaves the store empty. An unreadable one is logged
        and also leaves it empty.

        Returns:
            The store state after loading
        """
        try:
            payload = self.blob_store.load(self.key)
            if payload is None:
                logger.debug("No saved state under %s", self.key)
                return self.store.state
            state = loads(payload)
        except StorageError:
            logger.exception("Could not load saved state, starting empty")
            return self.store.state

        return self.store.dispatch(Action(LOAD_STATE, state))

    def save(self, state: StoreState) -> bool:
        """Write the full state. Returns False if the write failed."""
        try:
            self.blob_store.save(self.key, dumps(state))
        except StorageError:
            logger.exception("Could not save state")
            return False
        return True

    def start(self) -> StoreState:
        """Load the saved state, then save on every later change."""
        state = self.load()
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)
        return state

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, state: StoreState, action: Action) -> None:
        logger.debug("State changed by %s, saving", action.type)
        self.save(state)


def load_alert_tracker(blob_store: BlobStore, key: str = BUDGET_ALERTS_KEY) -> BudgetAlertTracker:
    """Restore the budget alert tracker so alerts fire once per worsening.

    Unreadable states are logged and give a fresh tracker.
    """
    try:
        payload = blob_store.load(key)
        if payload is None:
            return BudgetAlertTracker()
        return BudgetAlertTracker(alert_states_loads(payload))
    except StorageError:
        logger.exception("Could not load budget alert states, starting fresh")
        return BudgetAlertTracker()


def save_alert_tracker(
    blob_store: BlobStore, tracker: BudgetAlertTracker, key: str = BUDGET_ALERTS_KEY
) -> bool:
    """Write the tracker's last states. Returns False if the write failed."""
    try:
        blob_store.save(key, alert_states_dumps(tracker.last_states))
    except StorageError:
        logger.exception("Could not save budget alert states")
        return False
    return True
