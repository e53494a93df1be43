"""Tests for TransactionService."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.entities import TransactionType
from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.domain.ingestion import SmsIngestionService
from fintrack.domain.notifications import CollectingNotifier
from fintrack.domain.store import ADD_TRANSACTION, Action
from fintrack.domain.transaction import is_duplicate

from conftest import make_transaction


class TestCreateTransaction:
    def test_create(self, transaction_service, sample_account):
        txn = transaction_service.create_transaction(
            sample_account.id, "1,250.50", "Expense",
            txn_date=date(2025, 11, 2), category="groceries", note="Weekly shop",
        )

        assert txn.amount == Decimal("1250.50")
        assert txn.type == TransactionType.EXPENSE
        assert transaction_service.get_transaction(txn.id) == txn

    def test_defaults_to_today(self, transaction_service, sample_account):
        txn = transaction_service.create_transaction(sample_account.id, "10", "expense")
        assert txn.date == date.today()

    def test_rejects_zero_amount(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(sample_account.id, "0", "expense")

    def test_rejects_negative_amount(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(sample_account.id, "-5", "expense")

    def test_rejects_unknown_type(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(sample_account.id, "5", "transfer")

    def test_rejects_unknown_category(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(sample_account.id, "5", "expense", category="nope")

    def test_rejects_unknown_account(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction("missing", "5", "expense")

    def test_unassigned_account_allowed(self, transaction_service):
        txn = transaction_service.create_transaction(None, "5", "expense")
        assert txn.account_id is None
        assert transaction_service.account_name(txn) == "Unknown"


class TestUpdateAndDelete:
    def test_update(self, transaction_service, sample_account):
        txn = transaction_service.create_transaction(sample_account.id, "10", "expense")

        updated = transaction_service.update_transaction(txn.id, amount="20", category="shopping")

        assert updated.id == txn.id
        assert updated.amount == Decimal("20")
        assert updated.category == "shopping"
        assert transaction_service.get_transaction(txn.id) == updated

    def test_update_missing(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.update_transaction("missing", amount="20")

    def test_delete(self, transaction_service, sample_account):
        txn = transaction_service.create_transaction(sample_account.id, "10", "expense")
        transaction_service.delete_transaction(txn.id)
        assert transaction_service.get_transaction(txn.id) is None

    def test_dangling_account_reads_as_unknown(self, transaction_service, store):
        store.dispatch(Action(ADD_TRANSACTION, make_transaction("t1", account_id="gone")))
        txn = transaction_service.get_transaction("t1")
        assert transaction_service.account_name(txn) == "Unknown"


class TestListTransactions:
    def test_filters_and_order(self, transaction_service, sample_account):
        first = transaction_service.create_transaction(
            sample_account.id, "10", "expense", txn_date=date(2025, 11, 1), category="groceries"
        )
        second = transaction_service.create_transaction(
            sample_account.id, "20", "expense", txn_date=date(2025, 11, 20), category="shopping"
        )

        assert transaction_service.list_transactions() == [second, first]
        assert transaction_service.list_transactions(chronological=True) == [first, second]
        assert transaction_service.list_transactions(category="groceries") == [first]
        assert transaction_service.list_transactions(start_date=date(2025, 11, 10)) == [second]
        assert transaction_service.list_transactions(end_date=date(2025, 11, 10)) == [first]


class TestPending:
    @pytest.fixture
    def pending(self, store, sample_account):
        service = SmsIngestionService(store, CollectingNotifier(), allowed_senders=["AXISBK"])
        return service.ingest(
            "AXISBK",
            "INR 450.00 debited\nA/c no. XX1234\n01-11-25, 12:00:00\nUPI/P2M/1/SWIGGY",
            received_on=date(2025, 11, 1),
        )

    def test_confirm_moves_to_ledger_keeping_id(self, transaction_service, pending):
        confirmed = transaction_service.confirm_pending(pending.id, category="food_dining")

        assert confirmed.id == pending.id
        assert confirmed.category == "food_dining"
        assert transaction_service.list_pending() == []
        assert transaction_service.get_transaction(pending.id) == confirmed

    def test_confirm_can_change_type(self, transaction_service, pending):
        confirmed = transaction_service.confirm_pending(pending.id, txn_type="payment")
        assert confirmed.type == TransactionType.PAYMENT

    def test_confirm_missing(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.confirm_pending("missing")

    def test_discard(self, transaction_service, pending):
        transaction_service.discard_pending(pending.id)
        assert transaction_service.list_pending() == []
        assert transaction_service.list_transactions() == []


class TestImportStatement:
    STATEMENT = (
        "03/11/2025 UPI/123456/SWIGGY 450.00 24,550.00 Dr\n"
        "05/11/2025 SALARY 75,000.00 99,550.00 Cr\n"
    )

    def test_imports_lines(self, transaction_service, sample_account):
        result = transaction_service.import_statement(self.STATEMENT, sample_account.id)

        assert result == {"imported": 2, "skipped": 0}
        transactions = transaction_service.list_transactions()
        assert [t.amount for t in transactions] == [Decimal("450.00"), Decimal("75000.00")]
        assert all(t.account_id == sample_account.id for t in transactions)

    def test_reimport_skips_duplicates(self, transaction_service, sample_account):
        transaction_service.import_statement(self.STATEMENT, sample_account.id)
        result = transaction_service.import_statement(self.STATEMENT, sample_account.id)

        assert result == {"imported": 0, "skipped": 2}
        assert len(transaction_service.list_transactions()) == 2


class TestIsDuplicate:
    def test_same_original_sms(self):
        a = make_transaction("a", amount="1", original_sms="hello")
        b = make_transaction("b", amount="2", original_sms="hello")
        assert is_duplicate(b, [a])

    def test_same_amount_date_merchant(self):
        a = make_transaction("a", merchant_name="SHOP")
        b = make_transaction("b", merchant_name="SHOP")
        assert is_duplicate(b, [a])

    def test_different_merchant(self):
        a = make_transaction("a", merchant_name="SHOP")
        b = make_transaction("b", merchant_name="OTHER")
        assert not is_duplicate(b, [a])
