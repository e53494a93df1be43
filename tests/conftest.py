"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_store
from fintrack.database.persistence import StorePersistence
from fintrack.domain.account import AccountService
from fintrack.domain.budget import BudgetService
from fintrack.domain.card_group import CardGroupService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import (
    Account,
    AccountType,
    InitialDebt,
    OpeningBalance,
    Transaction,
    TransactionType,
)
from fintrack.domain.store import TransactionStore
from fintrack.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    blob_store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    blob_store.database_path = db_path
    blob_store.connect()

    yield blob_store

    # Cleanup
    blob_store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def store(temp_db):
    """Create a TransactionStore that saves every change to the temporary database."""
    store = TransactionStore()
    persistence = StorePersistence(store, temp_db)
    persistence.start()
    yield store
    persistence.stop()


@pytest.fixture
def account_service(store):
    """Create an AccountService on the test store."""
    return AccountService(store)


@pytest.fixture
def card_group_service(store):
    """Create a CardGroupService on the test store."""
    return CardGroupService(store)


@pytest.fixture
def category_service(store):
    """Create a CategoryService on the test store."""
    return CategoryService(store)


@pytest.fixture
def transaction_service(store):
    """Create a TransactionService on the test store."""
    return TransactionService(store)


@pytest.fixture
def budget_service(store):
    """Create a BudgetService on the test store."""
    return BudgetService(store)


@pytest.fixture
def sample_account(account_service):
    """Create a sample bank account for testing."""
    return account_service.create_account(
        name="Axis Savings", account_type="BANK", starting_balance="10000", last4_digits="1234"
    )


@pytest.fixture
def sample_card(account_service):
    """Create a sample credit card with a 10000 limit and 2000 initial debt."""
    return account_service.create_account(
        name="HDFC Regalia",
        account_type="CREDIT_CARD",
        starting_balance="2000",
        credit_limit="10000",
        last4_digits="4321",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


def make_account(account_id="acc1", name="Savings", account_type=AccountType.BANK, amount="0", **kwargs):
    """Build an Account entity with the starting balance type its account type needs."""
    amount = Decimal(amount)
    if account_type == AccountType.CREDIT_CARD:
        balance = InitialDebt(amount)
    else:
        balance = OpeningBalance(amount)
    return Account(id=account_id, name=name, type=account_type, starting_balance=balance, **kwargs)


def make_transaction(
    txn_id="t1", account_id="acc1", amount="100", txn_type=TransactionType.EXPENSE,
    txn_date=date(2025, 11, 15), **kwargs,
):
    """Build a Transaction entity with test defaults."""
    return Transaction(
        id=txn_id,
        account_id=account_id,
        amount=Decimal(amount),
        type=txn_type,
        date=txn_date,
        **kwargs,
    )
