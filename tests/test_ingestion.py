"""Tests for SMS ingestion into pending transactions."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.ingestion import SmsIngestionService, is_allowed_sender
from fintrack.domain.notifications import CollectingNotifier, LoggingNotifier
from fintrack.domain.store import ADD_ACCOUNT, Action

from conftest import make_account

RECEIVED = date(2025, 11, 25)

UPI_DEBIT = (
    "INR 1,234.56 debited\n"
    "A/c no. XX1234\n"
    "23-11-25, 10:15:22\n"
    "UPI/P2M/568615976445/JOHN DOE\n"
    "Axis Bank"
)


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def ingestion(store, notifier):
    return SmsIngestionService(store, notifier, allowed_senders=["AXISBK", "HDFCBK"])


class TestSenderFilter:
    def test_substring_case_insensitive(self):
        assert is_allowed_sender("VM-AxisBk", ["AXISBK"])
        assert is_allowed_sender("AD-HDFCBK-S", ["AXISBK", "HDFCBK"])
        assert not is_allowed_sender("VK-AMAZON", ["AXISBK"])
        assert not is_allowed_sender("", ["AXISBK"])

    def test_other_senders_ignored(self, ingestion, store, notifier):
        assert ingestion.ingest("VK-PROMOS", UPI_DEBIT, received_on=RECEIVED) is None
        assert store.state.pending_transactions == ()
        assert notifier.sent == []

    def test_default_allow_list(self, store, notifier):
        service = SmsIngestionService(store, notifier)
        assert "AXISBK" in service.allowed_senders
        assert "KOTAKB" in service.allowed_senders


class TestIngest:
    def test_creates_pending_and_notifies(self, ingestion, store, notifier, sample_account):
        pending = ingestion.ingest("AX-AXISBK", UPI_DEBIT, received_on=RECEIVED)

        assert pending is not None
        assert store.state.pending_transactions == (pending,)
        assert store.state.transactions == ()
        assert pending.account_id == sample_account.id
        assert pending.category == "sms_auto"
        assert pending.amount == Decimal("1234.56")
        assert pending.original_sms == UPI_DEBIT
        assert pending.note == "UPI - JOHN DOE"

        assert len(notifier.sent) == 1
        notification = notifier.sent[0]
        assert notification.title == "New Debit Detected"
        assert "JOHN DOE" in notification.body
        assert "XX1234" in notification.body
        assert notification.data == {"transactionId": pending.id}

    def test_unmatched_card_leaves_account_empty(self, ingestion):
        pending = ingestion.ingest("AX-AXISBK", UPI_DEBIT, received_on=RECEIVED)
        assert pending.account_id is None

    def test_account_match_uses_first_card_with_digits(self, ingestion, store):
        store.dispatch(Action(ADD_ACCOUNT, make_account("a1", "First", last4_digits="1234")))
        store.dispatch(Action(ADD_ACCOUNT, make_account("a2", "Second", last4_digits="1234")))

        pending = ingestion.ingest("AX-AXISBK", UPI_DEBIT, received_on=RECEIVED)

        assert pending.account_id == ingestion.accounts.find_by_last4("1234").id == "a1"

    def test_default_notifier_logs(self, store, caplog):
        service = SmsIngestionService(store, allowed_senders=["AXISBK"])
        assert isinstance(service.notifier, LoggingNotifier)

        with caplog.at_level(logging.INFO, logger="fintrack.domain.notifications"):
            service.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED)

        assert "New Debit Detected" in caplog.text
        assert "JOHN DOE" in caplog.text

    def test_credit_notification_title(self, ingestion, notifier):
        body = "INR 500.00 credited to A/c no. XX9999 on 20-11-25 at 09:00:00 IST. Info - IMPS/123/RAVI"
        ingestion.ingest("AXISBK", body, received_on=RECEIVED)
        assert notifier.sent[0].title == "New Credit Detected"

    def test_non_transaction_ignored(self, ingestion, store, notifier):
        assert ingestion.ingest("AXISBK", "Your OTP is 123456 for INR 10 debited", received_on=RECEIVED) is None
        assert ingestion.ingest("AXISBK", "Happy Diwali from Axis Bank", received_on=RECEIVED) is None
        assert store.state.pending_transactions == ()
        assert notifier.sent == []

    def test_missing_date_uses_received_date(self, ingestion):
        pending = ingestion.ingest("AXISBK", "Rs.200 debited from your account", received_on=RECEIVED)
        assert pending.date == RECEIVED


class TestDuplicates:
    def test_same_sms_twice_gives_one_pending(self, ingestion, store, notifier):
        ingestion.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED)
        assert ingestion.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED) is None

        assert len(store.state.pending_transactions) == 1
        assert len(notifier.sent) == 1

    def test_duplicate_of_confirmed_transaction(self, ingestion, store, transaction_service):
        pending = ingestion.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED)
        transaction_service.confirm_pending(pending.id, category="food_dining")

        assert ingestion.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED) is None
        assert store.state.pending_transactions == ()

    def test_same_amount_date_merchant_is_duplicate(self, ingestion, store):
        ingestion.ingest("AXISBK", UPI_DEBIT, received_on=RECEIVED)
        reworded = UPI_DEBIT.replace("Axis Bank", "- Axis Bank Ltd")

        assert ingestion.ingest("AXISBK", reworded, received_on=RECEIVED) is None
        assert len(store.state.pending_transactions) == 1
