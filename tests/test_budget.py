"""Tests for budget evaluation and the budget service."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.budget import BudgetAlertTracker, classify, evaluate, month_bounds, spend_for
from fintrack.domain.entities import Budget, BudgetState, TransactionType

from conftest import make_transaction

TODAY = date(2025, 11, 20)


def _budget(amount="1000", threshold=80):
    return Budget(
        id="b1", category_id="food_dining", amount=Decimal(amount),
        start_date=date(2025, 1, 1), alert_threshold=threshold,
    )


def _food(txn_id, amount, txn_date=date(2025, 11, 10), txn_type=TransactionType.EXPENSE):
    return make_transaction(txn_id, "acc1", amount, txn_type, txn_date, category="food_dining")


class TestMonthBounds:
    def test_regular_month(self):
        assert month_bounds(TODAY) == (date(2025, 11, 1), date(2025, 11, 30))

    def test_leap_february(self):
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))


class TestSpendFor:
    def test_counts_expenses_in_month_and_category(self):
        ledger = [
            _food("t1", "100"),
            _food("t2", "50", date(2025, 11, 30)),
            _food("t3", "999", date(2025, 10, 31)),
            _food("t4", "400", txn_type=TransactionType.INCOME),
            _food("t5", "300", txn_type=TransactionType.PAYMENT),
            make_transaction("t6", "acc1", "700", category="shopping"),
        ]
        start, end = month_bounds(TODAY)
        assert spend_for(ledger, "food_dining", start, end) == Decimal("150")


class TestClassify:
    @pytest.mark.parametrize(
        "percentage,expected",
        [
            (Decimal("0"), BudgetState.OK),
            (Decimal("79.9"), BudgetState.OK),
            (Decimal("80"), BudgetState.NEAR_LIMIT),
            (Decimal("100"), BudgetState.NEAR_LIMIT),
            (Decimal("100.01"), BudgetState.OVER_BUDGET),
        ],
    )
    def test_states(self, percentage, expected):
        assert classify(percentage, 80) == expected


class TestEvaluate:
    def test_near_limit(self):
        status = evaluate(_budget(), [_food("t1", "850")], today=TODAY)

        assert status.spent == Decimal("850")
        assert status.percentage == Decimal("85")
        assert status.state == BudgetState.NEAR_LIMIT

    def test_over_budget(self):
        status = evaluate(_budget(), [_food("t1", "1200")], today=TODAY)
        assert status.state == BudgetState.OVER_BUDGET

    def test_zero_budget_has_zero_percentage(self):
        status = evaluate(_budget("0"), [_food("t1", "10")], today=TODAY)
        assert status.percentage == Decimal("0")
        assert status.state == BudgetState.OK


class TestBudgetAlertTracker:
    def test_alerts_only_when_state_worsens(self):
        tracker = BudgetAlertTracker()
        budget = _budget()

        near = evaluate(budget, [_food("t1", "850")], today=TODAY)
        over = evaluate(budget, [_food("t1", "1200")], today=TODAY)

        first = tracker.check([near])
        repeat = tracker.check([near])
        worse = tracker.check([over])

        assert [n.title for n in first] == ["Budget Alert"]
        assert repeat == []
        assert [n.title for n in worse] == ["Budget Exceeded"]
        assert worse[0].data == {"budgetId": "b1"}

    def test_recovery_rearms_alert(self):
        tracker = BudgetAlertTracker()
        budget = _budget()
        ok = evaluate(budget, [], today=TODAY)
        near = evaluate(budget, [_food("t1", "900")], today=TODAY)

        tracker.check([near])
        tracker.check([ok])

        assert len(tracker.check([near])) == 1


class TestBudgetService:
    def test_set_budget_creates_then_updates(self, budget_service):
        first = budget_service.set_budget("food_dining", "5000")
        second = budget_service.set_budget("food_dining", "6000", alert_threshold=90)

        budgets = budget_service.list_budgets()
        assert len(budgets) == 1
        assert second.id == first.id
        assert budgets[0].amount == Decimal("6000")
        assert budgets[0].alert_threshold == 90

    def test_set_budget_requires_category(self, budget_service):
        with pytest.raises(ValueError, match="select a category"):
            budget_service.set_budget("", "100")

    def test_set_budget_rejects_bad_threshold(self, budget_service):
        with pytest.raises(ValueError, match="between 0 and 100"):
            budget_service.set_budget("food_dining", "100", alert_threshold=120)

    def test_set_budget_rejects_non_positive_amount(self, budget_service):
        with pytest.raises(ValueError):
            budget_service.set_budget("food_dining", "0")

    def test_delete_budget(self, budget_service):
        budget = budget_service.set_budget("food_dining", "5000")
        budget_service.delete_budget(budget.id)
        assert budget_service.list_budgets() == []

    def test_delete_missing_budget(self, budget_service):
        with pytest.raises(ValueError, match="not found"):
            budget_service.delete_budget("nope")

    def test_evaluate_all(self, budget_service, transaction_service, sample_account):
        budget_service.set_budget("food_dining", "1000")
        transaction_service.create_transaction(
            sample_account.id, "900", "expense", txn_date=TODAY, category="food_dining"
        )

        statuses = budget_service.evaluate_all(today=TODAY)

        assert len(statuses) == 1
        assert statuses[0].state == BudgetState.NEAR_LIMIT
