"""Mapper functions to convert between domain entities and the persisted snapshot.

The snapshot is one JSON document with camelCase keys::

    {"accounts": [...], "transactions": [...], "pendingTransactions": [...],
     "cardGroups": [...], "customCategories": [...], "budgets": [...]}

Decimals are written as strings and read back from strings or numbers. Keys
missing from an older snapshot load as empty lists.
"""

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from fintrack.domain import entities as domain
from fintrack.domain.errors import StorageError
from fintrack.domain.store import StoreState

SNAPSHOT_KEYS = {
    "accounts": "accounts",
    "transactions": "transactions",
    "pending_transactions": "pendingTransactions",
    "card_groups": "cardGroups",
    "custom_categories": "customCategories",
    "budgets": "budgets",
}


def _decimal_to_json(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _decimal_from_json(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    if value is None or value == "":
        return default
    # Floats go through str() so 0.1 stays 0.1
    return Decimal(str(value))


def _date_from_json(value: Any) -> date:
    # Timestamps such as "2025-11-23T10:15:00.000Z" keep only their date
    return date.fromisoformat(str(value)[:10])


def _category_id(value: Any) -> Optional[str]:
    """Normalize a stored category reference to its id."""
    if isinstance(value, dict):
        return value.get("id")
    return value or None


# Accounts

def account_to_dict(account: domain.Account) -> dict:
    """Convert Account entity to its snapshot form."""
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type.value,
        "startingBalance": _decimal_to_json(account.starting_balance.amount),
        "creditLimit": _decimal_to_json(account.credit_limit),
        "last4Digits": account.last4_digits,
        "cardGroup": account.card_group,
        "currency": account.currency,
    }


def account_from_dict(data: dict) -> domain.Account:
    """Convert a snapshot account to Account entity."""
    account_type = domain.AccountType.parse(data.get("type") or "BANK")
    starting = _decimal_from_json(data.get("startingBalance"), Decimal("0"))
    return domain.Account(
        id=str(data["id"]),
        name=data["name"],
        type=account_type,
        starting_balance=domain.starting_balance_for(account_type, starting),
        credit_limit=_decimal_from_json(data.get("creditLimit")),
        last4_digits=data.get("last4Digits") or None,
        card_group=data.get("cardGroup") or None,
        currency=data.get("currency") or "INR",
    )


# Card groups

def card_group_to_dict(group: domain.CardGroup) -> dict:
    """Convert CardGroup entity to its snapshot form."""
    return {
        "id": group.id,
        "name": group.name,
        "sharedCreditLimit": _decimal_to_json(group.shared_credit_limit),
        "startingBalance": _decimal_to_json(group.starting_balance.amount),
    }


def card_group_from_dict(data: dict) -> domain.CardGroup:
    """Convert a snapshot card group to CardGroup entity."""
    return domain.CardGroup(
        id=str(data["id"]),
        name=data["name"],
        shared_credit_limit=_decimal_from_json(data.get("sharedCreditLimit"), Decimal("0")),
        starting_balance=domain.InitialDebt(
            _decimal_from_json(data.get("startingBalance"), Decimal("0"))
        ),
    )


# Transactions

def transaction_to_dict(txn: domain.Transaction) -> dict:
    """Convert Transaction entity to its snapshot form."""
    return {
        "id": txn.id,
        "accountId": txn.account_id,
        "amount": _decimal_to_json(txn.amount),
        "type": txn.type.value,
        "date": txn.date.isoformat(),
        "category": txn.category,
        "note": txn.note,
        "location": txn.location,
        "merchantName": txn.merchant_name,
        "transactionMethod": txn.transaction_method,
        "originalSms": txn.original_sms,
        "last4Digits": txn.last4_digits,
    }


def transaction_from_dict(data: dict) -> domain.Transaction:
    """Convert a snapshot transaction to Transaction entity."""
    location = data.get("location")
    if isinstance(location, dict):
        location = location.get("address") or location.get("name")
    return domain.Transaction(
        id=str(data["id"]),
        account_id=data.get("accountId") or None,
        amount=_decimal_from_json(data.get("amount"), Decimal("0")),
        type=domain.TransactionType.parse(data.get("type") or "expense"),
        date=_date_from_json(data["date"]),
        category=_category_id(data.get("category")),
        note=data.get("note") or data.get("description"),
        location=location,
        merchant_name=data.get("merchantName"),
        transaction_method=data.get("transactionMethod"),
        original_sms=data.get("originalSms"),
        last4_digits=data.get("last4Digits"),
    )


# Custom categories

def category_to_dict(category: domain.Category) -> dict:
    """Convert Category entity to its snapshot form."""
    return {
        "id": category.id,
        "name": category.name,
        "emoji": category.emoji,
        "color": category.color,
        "type": category.type.value,
        "isCustom": category.is_custom,
        "isActive": category.is_active,
    }


def category_from_dict(data: dict) -> domain.Category:
    """Convert a snapshot custom category to Category entity."""
    return domain.Category(
        id=str(data["id"]),
        name=data["name"],
        emoji=data.get("emoji") or "🌟",
        color=data.get("color") or "#B2BEC3",
        type=domain.CategoryType(str(data.get("type") or "EXPENSE").upper()),
        is_custom=bool(data.get("isCustom", True)),
        is_active=bool(data.get("isActive", True)),
    )


# Budgets

def budget_to_dict(budget: domain.Budget) -> dict:
    """Convert Budget entity to its snapshot form."""
    return {
        "id": budget.id,
        "categoryId": budget.category_id,
        "amount": _decimal_to_json(budget.amount),
        "period": budget.period.value,
        "startDate": budget.start_date.isoformat(),
        "alertThreshold": budget.alert_threshold,
    }


def budget_from_dict(data: dict) -> domain.Budget:
    """Convert a snapshot budget to Budget entity."""
    return domain.Budget(
        id=str(data["id"]),
        category_id=_category_id(data.get("categoryId")),
        amount=_decimal_from_json(data.get("amount"), Decimal("0")),
        start_date=_date_from_json(data["startDate"]),
        alert_threshold=int(data.get("alertThreshold", 80)),
        period=domain.BudgetPeriod(str(data.get("period") or "MONTHLY").upper()),
    )


_TO_DICT = {
    "accounts": account_to_dict,
    "transactions": transaction_to_dict,
    "pending_transactions": transaction_to_dict,
    "card_groups": card_group_to_dict,
    "custom_categories": category_to_dict,
    "budgets": budget_to_dict,
}

_FROM_DICT = {
    "accounts": account_from_dict,
    "transactions": transaction_from_dict,
    "pending_transactions": transaction_from_dict,
    "card_groups": card_group_from_dict,
    "custom_categories": category_from_dict,
    "budgets": budget_from_dict,
}


def state_to_snapshot(state: StoreState) -> dict:
    """Convert the whole store state to a JSON-ready snapshot."""
    return {
        key: [_TO_DICT[name](item) for item in getattr(state, name)]
        for name, key in SNAPSHOT_KEYS.items()
    }


def snapshot_to_state(snapshot: dict) -> StoreState:
    """Convert a snapshot back to store state.

    Raises:
        StorageError: If the snapshot is not a mapping or an entry is malformed
    """
    if not isinstance(snapshot, dict):
        raise StorageError("Stored snapshot is not a JSON object")

    collections = {}
    for name, key in SNAPSHOT_KEYS.items():
        entries = snapshot.get(key) or []
        if not isinstance(entries, list):
            raise StorageError(f"Stored '{key}' is not a list")
        for entry in entries:
            if not isinstance(entry, dict):
                raise StorageError(f"Malformed entry in '{key}': expected an object, got {entry!r}")
        try:
            collections[name] = tuple(_FROM_DICT[name](entry) for entry in entries)
        except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise StorageError(f"Malformed entry in '{key}': {e}") from e
    return StoreState(**collections)


def dumps(state: StoreState) -> str:
    """Serialize store state to the persisted JSON payload."""
    return json.dumps(state_to_snapshot(state), ensure_ascii=False)


def loads(payload: str) -> StoreState:
    """Deserialize a persisted JSON payload to store state.

    Raises:
        StorageError: If the payload is not valid JSON or not a valid snapshot
    """
    try:
        snapshot = json.loads(payload)
    except ValueError as e:
        raise StorageError(f"Stored snapshot is not valid JSON: {e}") from e
    return snapshot_to_state(snapshot)


def alert_states_dumps(states: dict[str, domain.BudgetState]) -> str:
    """Serialize the alert tracker's last states as ``{budgetId: state}``."""
    return json.dumps({budget_id: state.value for budget_id, state in states.items()})


def alert_states_loads(payload: str) -> dict[str, domain.BudgetState]:
    """Deserialize alert tracker states.

    Raises:
        StorageError: If the payload is not a JSON object of known states
    """
    try:
        raw = json.loads(payload)
    except ValueError as e:
        raise StorageError(f"Stored alert states are not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise StorageError("Stored alert states are not a JSON object")
    try:
        return {str(budget_id): domain.BudgetState(value) for budget_id, value in raw.items()}
    except ValueError as e:
        raise StorageError(f"Unknown budget state in stored alerts: {e}") from e
