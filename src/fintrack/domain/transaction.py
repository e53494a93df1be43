"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from fintrack.domain.category import SMS_AUTO_CATEGORY, is_valid_category
from fintrack.domain.entities import Transaction, TransactionType
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    pending_transaction_not_found,
    transaction_not_found,
)
from fintrack.domain.statement_parser import StatementTextParser
from fintrack.domain.store import (
    ADD_TRANSACTION,
    ADD_TRANSACTIONS_BULK,
    CONFIRM_TRANSACTION,
    DELETE_PENDING_TRANSACTION,
    DELETE_TRANSACTION,
    UPDATE_TRANSACTION,
    Action,
    TransactionStore,
)
from fintrack.utils.amount_parser import parse_positive_amount
from fintrack.utils.ids import new_id

logger = logging.getLogger(__name__)

UNKNOWN_ACCOUNT = "Unknown"


def is_duplicate(candidate: Transaction, existing: Iterable[Transaction]) -> bool:
    """Check whether a new draft repeats a transaction already known.

    A draft is a duplicate when an existing entry carries the same original
    message text, or the same amount, date and merchant name.
    """
    for txn in existing:
        if txn is None:
            continue
        if candidate.original_sms and txn.original_sms == candidate.original_sms:
            return True
        if (
            txn.amount == candidate.amount
            and txn.date == candidate.date
            and txn.merchant_name == candidate.merchant_name
        ):
            return True
    return False


class TransactionService:
    """Service for managing confirmed and pending transactions."""

    def __init__(self, store: TransactionStore):
        """Initialize transaction service.

        Args:
            store: TransactionStore instance
        """
        self.store = store
        self.statement_parser = StatementTextParser()

    def create_transaction(
        self,
        account_id: Optional[str],
        amount: str,
        txn_type: TransactionType | str,
        txn_date: Optional[date] = None,
        category: Optional[str] = None,
        note: Optional[str] = None,
        location: Optional[str] = None,
        merchant_name: Optional[str] = None,
    ) -> Transaction:
        """Create a transaction from user input.

        Args:
            account_id: Account ID (None for an unassigned transaction)
            amount: Amount as entered; must be greater than zero
            txn_type: income, expense or payment (any case)
            txn_date: Transaction date (defaults to today)
            category: Category ID
            note: Optional note
            location: Optional location text
            merchant_name: Optional merchant name

        Returns:
            The created transaction

        Raises:
            ValidationError: If amount, type or category is invalid
            NotFoundError: If the account doesn't exist
        """
        parsed_amount = parse_positive_amount(amount)
        parsed_type = TransactionType.parse(txn_type)
        self._check_account(account_id)
        self._check_category(category)

        transaction = Transaction(
            id=new_id(),
            account_id=account_id,
            amount=parsed_amount,
            type=parsed_type,
            date=txn_date or date.today(),
            category=category,
            note=note or None,
            location=location,
            merchant_name=merchant_name,
        )
        self.store.dispatch(Action(ADD_TRANSACTION, transaction))
        return transaction

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        for txn in self.store.state.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def update_transaction(
        self,
        transaction_id: str,
        account_id: Optional[str] = None,
        amount: Optional[str] = None,
        txn_type: Optional[TransactionType | str] = None,
        txn_date: Optional[date] = None,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Update transaction fields in place. Fields left as None are not changed.

        Raises:
            NotFoundError: If transaction or account doesn't exist
            ValidationError: If a new value is invalid
        """
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        changes = {}
        if account_id is not None:
            self._check_account(account_id)
            changes["account_id"] = account_id
        if amount is not None:
            changes["amount"] = parse_positive_amount(amount)
        if txn_type is not None:
            changes["type"] = TransactionType.parse(txn_type)
        if txn_date is not None:
            changes["date"] = txn_date
        if category is not None:
            self._check_category(category)
            changes["category"] = category
        if note is not None:
            changes["note"] = note

        updated = replace(txn, **changes)
        self.store.dispatch(Action(UPDATE_TRANSACTION, updated))
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if self.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.store.dispatch(Action(DELETE_TRANSACTION, transaction_id))

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[str] = None,
        category: Optional[str] = None,
        chronological: bool = False,
    ) -> list[Transaction]:
        """List transactions with filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Optional account ID filter
            category: Optional category ID filter
            chronological: Sort oldest first instead of the stored
                most-recent-first order

        Returns:
            List of transaction entities
        """
        result = []
        for txn in self.store.state.transactions:
            if start_date is not None and txn.date < start_date:
                continue
            if end_date is not None and txn.date > end_date:
                continue
            if account_id is not None and txn.account_id != account_id:
                continue
            if category is not None and txn.category != category:
                continue
            result.append(txn)

        if chronological:
            result.sort(key=lambda t: t.date)
        return result

    def account_name(self, txn: Transaction) -> str:
        """Name of the transaction's account, or "Unknown" if it is gone."""
        for acc in self.store.state.accounts:
            if acc.id == txn.account_id:
                return acc.name
        return UNKNOWN_ACCOUNT

    # Pending transactions

    def list_pending(self) -> list[Transaction]:
        return list(self.store.state.pending_transactions)

    def get_pending(self, pending_id: str) -> Optional[Transaction]:
        for txn in self.store.state.pending_transactions:
            if txn.id == pending_id:
                return txn
        return None

    def confirm_pending(
        self,
        pending_id: str,
        category: Optional[str] = None,
        account_id: Optional[str] = None,
        txn_type: Optional[TransactionType | str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Confirm a pending transaction, optionally editing it first.

        The edited copy is added to the ledger, then the draft is dropped from
        the pending list.

        Raises:
            NotFoundError: If the pending transaction or account doesn't exist
            ValidationError: If the category or type is invalid
        """
        pending = self.get_pending(pending_id)
        if pending is None:
            raise NotFoundError(pending_transaction_not_found(pending_id))

        changes = {}
        if category is not None:
            self._check_category(category)
            changes["category"] = category
        if account_id is not None:
            self._check_account(account_id)
            changes["account_id"] = account_id
        if txn_type is not None:
            changes["type"] = TransactionType.parse(txn_type)
        if note is not None:
            changes["note"] = note

        confirmed = replace(pending, **changes)
        self.store.dispatch(Action(ADD_TRANSACTION, confirmed))
        self.store.dispatch(Action(CONFIRM_TRANSACTION, pending_id))
        return confirmed

    def discard_pending(self, pending_id: str) -> None:
        """Drop a pending transaction without adding it to the ledger.

        Raises:
            NotFoundError: If the pending transaction doesn't exist
        """
        if self.get_pending(pending_id) is None:
            raise NotFoundError(pending_transaction_not_found(pending_id))
        self.store.dispatch(Action(DELETE_PENDING_TRANSACTION, pending_id))

    # Statement import

    def import_statement(self, text: str, account_id: Optional[str]) -> dict:
        """Add the transactions found in statement text to the ledger.

        Args:
            text: Plain text extracted from a bank statement
            account_id: Account the statement belongs to

        Returns:
            Dict with import statistics:
            - imported: number of transactions added
            - skipped: number of duplicates left out
        """
        self._check_account(account_id)

        known = list(self.store.state.transactions) + list(self.store.state.pending_transactions)
        batch = []
        skipped = 0
        for line in self.statement_parser.parse(text):
            candidate = Transaction(
                id=new_id(),
                account_id=account_id,
                amount=line.amount,
                type=line.type,
                date=line.date,
                note=line.description,
                merchant_name=line.description,
                original_sms=line.raw,
            )
            if is_duplicate(candidate, known + batch):
                skipped += 1
                continue
            batch.append(candidate)

        if batch:
            self.store.dispatch(Action(ADD_TRANSACTIONS_BULK, batch))
        logger.info("Imported %d statement transactions (%d duplicates skipped)", len(batch), skipped)
        return {"imported": len(batch), "skipped": skipped}

    def _check_account(self, account_id: Optional[str]) -> None:
        if account_id is None:
            return
        if not any(acc.id == account_id for acc in self.store.state.accounts):
            raise NotFoundError(account_not_found(account_id))

    def _check_category(self, category: Optional[str]) -> None:
        if category is None or category == SMS_AUTO_CATEGORY:
            return
        if not is_valid_category(category, self.store.state.custom_categories):
            raise ValidationError(category_not_found(category))
