"""In-memory application state and its transitions.

The whole state is one immutable ``StoreState``. It only changes through the
named transition functions below, each a pure ``(state, payload) -> state``
function. ``reduce`` maps an ``Action`` onto its transition and
``TransactionStore`` holds the current state and tells subscribers (such as
the persistence hook) about every change.

Conventions kept by the transitions:
- new transactions and pending transactions are prepended (most recent
  first); nothing is re-sorted by date;
- ids are trusted, no uniqueness check is made;
- deleting an account removes its transactions, deleting a card group only
  ungroups its member accounts.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from fintrack.domain.entities import Account, Budget, CardGroup, Category, Transaction


@dataclass(frozen=True)
class StoreState:
    """Snapshot of every collection the application tracks."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    pending_transactions: tuple[Transaction, ...] = ()
    card_groups: tuple[CardGroup, ...] = ()
    custom_categories: tuple[Category, ...] = ()
    budgets: tuple[Budget, ...] = ()


COLLECTIONS = tuple(f.name for f in fields(StoreState))


@dataclass(frozen=True)
class Action:
    """A named state transition and its payload."""

    type: str
    payload: Any = None


LOAD_STATE = "LOAD_STATE"
ADD_ACCOUNT = "ADD_ACCOUNT"
UPDATE_ACCOUNT = "UPDATE_ACCOUNT"
DELETE_ACCOUNT = "DELETE_ACCOUNT"
ADD_CARD_GROUP = "ADD_CARD_GROUP"
UPDATE_CARD_GROUP = "UPDATE_CARD_GROUP"
DELETE_CARD_GROUP = "DELETE_CARD_GROUP"
ADD_TRANSACTION = "ADD_TRANSACTION"
ADD_TRANSACTIONS_BULK = "ADD_TRANSACTIONS_BULK"
UPDATE_TRANSACTION = "UPDATE_TRANSACTION"
DELETE_TRANSACTION = "DELETE_TRANSACTION"
ADD_PENDING_TRANSACTION = "ADD_PENDING_TRANSACTION"
CONFIRM_TRANSACTION = "CONFIRM_TRANSACTION"
DELETE_PENDING_TRANSACTION = "DELETE_PENDING_TRANSACTION"
ADD_CUSTOM_CATEGORY = "ADD_CUSTOM_CATEGORY"
UPDATE_CUSTOM_CATEGORY = "UPDATE_CUSTOM_CATEGORY"
DELETE_CUSTOM_CATEGORY = "DELETE_CUSTOM_CATEGORY"
ADD_BUDGET = "ADD_BUDGET"
UPDATE_BUDGET = "UPDATE_BUDGET"
DELETE_BUDGET = "DELETE_BUDGET"


def _replace_by_id(items: tuple, item: Any) -> tuple:
    return tuple(item if existing.id == item.id else existing for existing in items)


def _remove_by_id(items: tuple, item_id: str) -> tuple:
    return tuple(existing for existing in items if existing.id != item_id)


# State loading

def load_state(state: StoreState, snapshot: Union[StoreState, Mapping[str, Iterable]]) -> StoreState:
    """Replace the whole state with a loaded snapshot.

    Collections missing from the snapshot (older persisted data) come back
    empty.
    """
    if isinstance(snapshot, StoreState):
        return snapshot
    return StoreState(**{name: tuple(snapshot.get(name) or ()) for name in COLLECTIONS})


# Accounts

def add_account(state: StoreState, account: Account) -> StoreState:
    return replace(state, accounts=state.accounts + (account,))


def update_account(state: StoreState, account: Account) -> StoreState:
    return replace(state, accounts=_replace_by_id(state.accounts, account))


def delete_account(state: StoreState, account_id: str) -> StoreState:
    """Remove an account and every transaction booked on it.

    Card groups are left alone; a group without members is still valid.
    """
    return replace(
        state,
        accounts=_remove_by_id(state.accounts, account_id),
        transactions=tuple(t for t in state.transactions if t.account_id != account_id),
    )


# Card groups

def add_card_group(state: StoreState, group: CardGroup) -> StoreState:
    return replace(state, card_groups=state.card_groups + (group,))


def update_card_group(state: StoreState, group: CardGroup) -> StoreState:
    return replace(state, card_groups=_replace_by_id(state.card_groups, group))


def delete_card_group(state: StoreState, group_id: str) -> StoreState:
    """Remove a card group and ungroup its members (accounts are kept)."""
    return replace(
        state,
        card_groups=_remove_by_id(state.card_groups, group_id),
        accounts=tuple(
            replace(acc, card_group=None) if acc.card_group == group_id else acc
            for acc in state.accounts
        ),
    )


# Transactions

def add_transaction(state: StoreState, transaction: Transaction) -> StoreState:
    return replace(state, transactions=(transaction,) + state.transactions)


def add_transactions_bulk(state: StoreState, transactions: Iterable[Transaction]) -> StoreState:
    return replace(state, transactions=tuple(transactions) + state.transactions)


def update_transaction(state: StoreState, transaction: Transaction) -> StoreState:
    return replace(state, transactions=_replace_by_id(state.transactions, transaction))


def delete_transaction(state: StoreState, transaction_id: str) -> StoreState:
    return replace(state, transactions=_remove_by_id(state.transactions, transaction_id))


# Pending transactions

def add_pending_transaction(state: StoreState, transaction: Transaction) -> StoreState:
    return replace(state, pending_transactions=(transaction,) + state.pending_transactions)


def confirm_transaction(state: StoreState, transaction_id: str) -> StoreState:
    """Drop a pending transaction after the caller has added its confirmed copy.

    Promotion to the ledger is a separate ``add_transaction``.
    """
    return replace(
        state, pending_transactions=_remove_by_id(state.pending_transactions, transaction_id)
    )


def delete_pending_transaction(state: StoreState, transaction_id: str) -> StoreState:
    return replace(
        state, pending_transactions=_remove_by_id(state.pending_transactions, transaction_id)
    )


# Custom categories

def add_custom_category(state: StoreState, category: Category) -> StoreState:
    return replace(state, custom_categories=state.custom_categories + (category,))


def update_custom_category(state: StoreState, category: Category) -> StoreState:
    return replace(state, custom_categories=_replace_by_id(state.custom_categories, category))


def delete_custom_category(state: StoreState, category_id: str) -> StoreState:
    return replace(state, custom_categories=_remove_by_id(state.custom_categories, category_id))


# Budgets

def add_budget(state: StoreState, budget: Budget) -> StoreState:
    return replace(state, budgets=state.budgets + (budget,))


def update_budget(state: StoreState, budget: Budget) -> StoreState:
    return replace(state, budgets=_replace_by_id(state.budgets, budget))


def delete_budget(state: StoreState, budget_id: str) -> StoreState:
    return replace(state, budgets=_remove_by_id(state.budgets, budget_id))


TRANSITIONS: dict[str, Callable[[StoreState, Any], StoreState]] = {
    LOAD_STATE: load_state,
    ADD_ACCOUNT: add_account,
    UPDATE_ACCOUNT: update_account,
    DELETE_ACCOUNT: delete_account,
    ADD_CARD_GROUP: add_card_group,
    UPDATE_CARD_GROUP: update_card_group,
    DELETE_CARD_GROUP: delete_card_group,
    ADD_TRANSACTION: add_transaction,
    ADD_TRANSACTIONS_BULK: add_transactions_bulk,
    UPDATE_TRANSACTION: update_transaction,
    DELETE_TRANSACTION: delete_transaction,
    ADD_PENDING_TRANSACTION: add_pending_transaction,
    CONFIRM_TRANSACTION: confirm_transaction,
    DELETE_PENDING_TRANSACTION: delete_pending_transaction,
    ADD_CUSTOM_CATEGORY: add_custom_category,
    UPDATE_CUSTOM_CATEGORY: update_custom_category,
    DELETE_CUSTOM_CATEGORY: delete_custom_category,
    ADD_BUDGET: add_budget,
    UPDATE_BUDGET: update_budget,
    DELETE_BUDGET: delete_budget,
}


def reduce(state: StoreState, action: Action) -> StoreState:
    """Apply an action to a state. Unknown action types leave it unchanged."""
    transition = TRANSITIONS.get(action.type)
    if transition is None:
        return state
    return transition(state, action.payload)


Listener = Callable[[StoreState, Action], None]


class TransactionStore:
    """Holder of the current state with change notification."""

    def __init__(self, state: Optional[StoreState] = None):
        """Initialize the store.

        Args:
            state: Initial state (defaults to an empty state)
        """
        self._state = state if state is not None else StoreState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> StoreState:
        return self._state

    def dispatch(self, action: Action) -> StoreState:
        """Apply an action and notify subscribers when the state changed."""
        new_state = reduce(self._state, action)
        if new_state != self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state, action)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
