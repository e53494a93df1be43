"""Account domain service."""

import re
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from fintrack.domain.credit import account_balance
from fintrack.domain.entities import Account, AccountType, starting_balance_for
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    card_group_not_found,
)
from fintrack.domain.store import (
    ADD_ACCOUNT,
    DELETE_ACCOUNT,
    UPDATE_ACCOUNT,
    Action,
    TransactionStore,
)
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.ids import new_id

LAST4_PATTERN = re.compile(r"^\d{4}$")


def _validate_last4(last4_digits: Optional[str]) -> Optional[str]:
    if last4_digits is None or last4_digits == "":
        return None
    last4_digits = last4_digits.strip()
    if not LAST4_PATTERN.match(last4_digits):
        raise ValidationError(f"Last 4 digits must be exactly 4 digits, got '{last4_digits}'")
    return last4_digits


class AccountService:
    """Service for managing accounts."""

    def __init__(self, store: TransactionStore):
        """Initialize account service.

        Args:
            store: TransactionStore instance
        """
        self.store = store

    def create_account(
        self,
        name: str,
        account_type: AccountType | str,
        starting_balance: str = "0",
        credit_limit: Optional[str] = None,
        last4_digits: Optional[str] = None,
        currency: str = "INR",
    ) -> Account:
        """Create a new account.

        Args:
            name: Account name
            account_type: Account type (BANK, CREDIT_CARD, CASH, OTHER)
            starting_balance: Opening balance, or initial debt for credit cards
            credit_limit: Credit limit (credit cards only)
            last4_digits: Last four digits of the card or account number
            currency: Currency code

        Returns:
            The created account

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If account name already exists
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        name = name.strip()
        if isinstance(account_type, str):
            account_type = AccountType.parse(account_type)

        for acc in self.store.state.accounts:
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        # Initial debt on a card cannot be negative; bank accounts may be overdrawn
        balance = parse_amount(
            starting_balance or "0", allow_negative=account_type != AccountType.CREDIT_CARD
        )
        limit = None
        if credit_limit not in (None, ""):
            if account_type != AccountType.CREDIT_CARD:
                raise ValidationError("Only credit cards have a credit limit")
            limit = parse_amount(credit_limit)

        account = Account(
            id=new_id(),
            name=name,
            type=account_type,
            starting_balance=starting_balance_for(account_type, balance),
            credit_limit=limit,
            last4_digits=_validate_last4(last4_digits),
            currency=currency,
        )
        self.store.dispatch(Action(ADD_ACCOUNT, account))
        return account

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        for acc in self.store.state.accounts:
            if acc.id == account_id:
                return acc
        return None

    def list_accounts(self) -> list[Account]:
        """List all accounts in stored order."""
        return list(self.store.state.accounts)

    def find_by_last4(self, last4_digits: Optional[str]) -> Optional[Account]:
        """Return the first account whose last 4 digits match."""
        if not last4_digits:
            return None
        for acc in self.store.state.accounts:
            if acc.last4_digits == last4_digits:
                return acc
        return None

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        starting_balance: Optional[str] = None,
        credit_limit: Optional[str] = None,
        last4_digits: Optional[str] = None,
    ) -> Account:
        """Update account fields. Fields left as None are not changed.

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If a new value is invalid
            ConflictError: If the new name is already taken
        """
        account = self._require(account_id)
        changes = {}

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name is required")
            for acc in self.store.state.accounts:
                if acc.id != account_id and acc.name == name:
                    raise ConflictError(f"Account with name '{name}' already exists")
            changes["name"] = name

        if starting_balance is not None:
            balance = parse_amount(starting_balance, allow_negative=not account.is_credit_card)
            changes["starting_balance"] = starting_balance_for(account.type, balance)

        if credit_limit is not None:
            if not account.is_credit_card:
                raise ValidationError("Only credit cards have a credit limit")
            changes["credit_limit"] = parse_amount(credit_limit)

        if last4_digits is not None:
            changes["last4_digits"] = _validate_last4(last4_digits)

        updated = replace(account, **changes)
        self.store.dispatch(Action(UPDATE_ACCOUNT, updated))
        return updated

    def assign_card_group(self, account_id: str, group_id: Optional[str]) -> Account:
        """Put a credit card into a card group, or take it out with ``None``.

        Raises:
            NotFoundError: If the account or group doesn't exist
            ValidationError: If the account is not a credit card
        """
        account = self._require(account_id)
        if group_id is not None:
            if not account.is_credit_card:
                raise ValidationError("Only credit cards can join a card group")
            if not any(g.id == group_id for g in self.store.state.card_groups):
                raise NotFoundError(card_group_not_found(group_id))

        updated = replace(account, card_group=group_id)
        self.store.dispatch(Action(UPDATE_ACCOUNT, updated))
        return updated

    def delete_account(self, account_id: str) -> int:
        """Delete an account together with its transactions.

        Returns:
            Number of transactions removed with the account

        Raises:
            NotFoundError: If the account doesn't exist
        """
        self._require(account_id)
        removed = sum(1 for t in self.store.state.transactions if t.account_id == account_id)
        self.store.dispatch(Action(DELETE_ACCOUNT, account_id))
        return removed

    def get_balance(self, account_id: str) -> Decimal:
        """Current balance, or available credit for credit cards."""
        return account_balance(self._require(account_id), self.store.state.transactions)

    def total_balance(self) -> Decimal:
        """Sum of the balances of every account."""
        ledger = self.store.state.transactions
        return sum(
            (account_balance(acc, ledger) for acc in self.store.state.accounts), Decimal("0")
        )

    def _require(self, account_id: str) -> Account:
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account
