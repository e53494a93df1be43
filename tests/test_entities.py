"""Tests for domain entities."""

from decimal import Decimal

import pytest

from fintrack.domain.entities import (
    Account,
    AccountType,
    BudgetState,
    InitialDebt,
    OpeningBalance,
    TransactionType,
    starting_balance_for,
)
from fintrack.domain.errors import DomainError, ValidationError


class TestStartingBalance:
    def test_credit_card_requires_initial_debt(self):
        with pytest.raises(ValidationError):
            Account(
                id="c1", name="Card", type=AccountType.CREDIT_CARD,
                starting_balance=OpeningBalance(Decimal("100")),
            )

    def test_bank_rejects_initial_debt(self):
        with pytest.raises(ValidationError):
            Account(
                id="a1", name="Bank", type=AccountType.BANK,
                starting_balance=InitialDebt(Decimal("100")),
            )

    def test_starting_balance_for(self):
        assert starting_balance_for(AccountType.CREDIT_CARD, Decimal("5")) == InitialDebt(Decimal("5"))
        assert starting_balance_for(AccountType.CASH, Decimal("5")) == OpeningBalance(Decimal("5"))

    def test_default_is_zero_opening_balance(self):
        account = Account(id="a1", name="Wallet", type=AccountType.CASH)
        assert account.starting_balance == OpeningBalance(Decimal("0"))


class TestEnums:
    @pytest.mark.parametrize("text", ["expense", "Expense", "EXPENSE", " expense "])
    def test_transaction_type_case_insensitive(self, text):
        assert TransactionType.parse(text) == TransactionType.EXPENSE

    def test_transaction_type_unknown(self):
        with pytest.raises(ValidationError):
            TransactionType.parse("refund")

    def test_account_type_accepts_dashes(self):
        assert AccountType.parse("credit-card") == AccountType.CREDIT_CARD

    def test_budget_state_severity_order(self):
        assert BudgetState.OK.severity < BudgetState.NEAR_LIMIT.severity < BudgetState.OVER_BUDGET.severity


class TestErrors:
    def test_domain_errors_are_value_errors(self):
        assert issubclass(DomainError, ValueError)
        assert issubclass(ValidationError, DomainError)
