"""Tests for credit card accounting."""

from decimal import Decimal

from fintrack.domain.credit import (
    account_balance,
    available_credit,
    card_summary,
    cards_in_group,
    group_summary,
    spent_for,
    utilization,
)
from fintrack.domain.entities import AccountType, CardGroup, InitialDebt, TransactionType

from conftest import make_account, make_transaction


def _card_ledger():
    return [
        make_transaction("t1", "card1", "500", TransactionType.EXPENSE),
        make_transaction("t2", "card1", "1000", TransactionType.PAYMENT),
        make_transaction("t3", "card1", "300", TransactionType.INCOME),
        make_transaction("t4", "other", "9999", TransactionType.EXPENSE),
    ]


class TestSpentFor:
    def test_expense_adds_payment_subtracts_income_ignored(self):
        spent = spent_for(_card_ledger(), ["card1"], Decimal("2000"))
        assert spent == Decimal("1500")

    def test_empty_ledger_returns_starting_balance(self):
        assert spent_for([], ["card1"], Decimal("700")) == Decimal("700")

    def test_overpayment_goes_negative(self):
        ledger = [make_transaction("t1", "card1", "800", TransactionType.PAYMENT)]
        assert spent_for(ledger, ["card1"], Decimal("500")) == Decimal("-300")

    def test_sums_across_cards(self):
        ledger = [
            make_transaction("t1", "a", "100"),
            make_transaction("t2", "b", "200"),
            make_transaction("t3", "c", "400"),
        ]
        assert spent_for(ledger, ["a", "b"]) == Decimal("300")


class TestAvailableAndUtilization:
    def test_individual_card(self):
        ledger = _card_ledger()
        limit = Decimal("10000")

        assert available_credit(limit, ledger, ["card1"], Decimal("2000")) == Decimal("8500")
        assert utilization(limit, ledger, ["card1"], Decimal("2000")) == Decimal("15")

    def test_overspent_is_clamped(self):
        ledger = [make_transaction("t1", "card1", "1500")]
        limit = Decimal("1000")

        assert available_credit(limit, ledger, ["card1"]) == Decimal("0")
        assert utilization(limit, ledger, ["card1"]) == Decimal("100")

    def test_zero_limit_has_zero_utilization(self):
        ledger = [make_transaction("t1", "card1", "100")]
        assert utilization(Decimal("0"), ledger, ["card1"]) == Decimal("0")


class TestGroups:
    def test_cards_in_group(self):
        accounts = [
            make_account("c1", "Card 1", AccountType.CREDIT_CARD, card_group="g1"),
            make_account("c2", "Card 2", AccountType.CREDIT_CARD, card_group="g2"),
            make_account("c3", "Card 3", AccountType.CREDIT_CARD, card_group="g1"),
        ]
        assert [a.id for a in cards_in_group(accounts, "g1")] == ["c1", "c3"]
        assert cards_in_group(accounts, None) == []

    def test_group_summary_uses_shared_limit(self):
        group = CardGroup(
            id="g1", name="HDFC", shared_credit_limit=Decimal("20000"),
            starting_balance=InitialDebt(Decimal("1000")),
        )
        accounts = [
            make_account("c1", "Card 1", AccountType.CREDIT_CARD, credit_limit=Decimal("5000"), card_group="g1"),
            make_account("c2", "Card 2", AccountType.CREDIT_CARD, credit_limit=Decimal("5000"), card_group="g1"),
            make_account("c3", "Card 3", AccountType.CREDIT_CARD, credit_limit=Decimal("5000")),
        ]
        ledger = [
            make_transaction("t1", "c1", "2000"),
            make_transaction("t2", "c2", "2000"),
            make_transaction("t3", "c3", "2000"),
        ]

        summary = group_summary(group, accounts, ledger)

        assert summary.limit == Decimal("20000")
        assert summary.spent == Decimal("5000")
        assert summary.available == Decimal("15000")
        assert summary.utilization == Decimal("25")


class TestCardSummary:
    def test_card_summary(self):
        card = make_account(
            "card1", "Regalia", AccountType.CREDIT_CARD, "2000", credit_limit=Decimal("10000")
        )
        summary = card_summary(card, _card_ledger())

        assert summary.spent == Decimal("1500")
        assert summary.available == Decimal("8500")
        assert summary.utilization == Decimal("15")


class TestAccountBalance:
    def test_bank_account(self):
        account = make_account("acc1", "Savings", AccountType.BANK, "10000")
        ledger = [
            make_transaction("t1", "acc1", "5000", TransactionType.INCOME),
            make_transaction("t2", "acc1", "1200", TransactionType.EXPENSE),
            make_transaction("t3", "acc1", "800", TransactionType.PAYMENT),
        ]
        assert account_balance(account, ledger) == Decimal("13000")

    def test_credit_card_is_limit_minus_debt(self):
        card = make_account(
            "card1", "Regalia", AccountType.CREDIT_CARD, "2000", credit_limit=Decimal("10000")
        )
        assert account_balance(card, _card_ledger()) == Decimal("8500")

    def test_overspent_card_goes_negative(self):
        card = make_account(
            "card1", "Regalia", AccountType.CREDIT_CARD, "0", credit_limit=Decimal("1000")
        )
        ledger = [make_transaction("t1", "card1", "1500")]
        assert account_balance(card, ledger) == Decimal("-500")
