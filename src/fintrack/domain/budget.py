"""Budget evaluation and budget domain service.

Evaluation is pure: it computes month-to-date spend for a budget's category
and classifies it. Deciding when to notify is left to ``BudgetAlertTracker``,
which only reports a budget when it moves into a worse state, so repeated
evaluations of an unchanged ledger stay silent.
"""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from fintrack.domain.category import resolve_category
from fintrack.domain.entities import (
    Budget,
    BudgetState,
    BudgetStatus,
    Notification,
    Transaction,
    TransactionType,
)
from fintrack.domain.errors import NotFoundError, ValidationError, budget_not_found
from fintrack.domain.store import ADD_BUDGET, DELETE_BUDGET, UPDATE_BUDGET, Action, TransactionStore
from fintrack.utils.amount_parser import parse_positive_amount
from fintrack.utils.ids import new_id

HUNDRED = Decimal("100")


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the calendar month containing ``day``."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def spend_for(
    ledger: Iterable[Transaction],
    category_id: str,
    month_start: date,
    month_end: date,
) -> Decimal:
    """Sum expenses booked on a category between two dates (inclusive).

    Income and payments never count towards a budget.
    """
    total = Decimal("0")
    for txn in ledger or ():
        if txn is None or txn.date is None or txn.category != category_id:
            continue
        try:
            txn_type = TransactionType.parse(txn.type)
        except ValueError:
            continue
        if txn_type == TransactionType.EXPENSE and month_start <= txn.date <= month_end:
            total += txn.amount
    return total


def classify(percentage: Decimal, alert_threshold: int) -> BudgetState:
    """Map a spend percentage onto a budget state."""
    if percentage > HUNDRED:
        return BudgetState.OVER_BUDGET
    if percentage >= alert_threshold:
        return BudgetState.NEAR_LIMIT
    return BudgetState.OK


def evaluate(budget: Budget, ledger: Iterable[Transaction], today: Optional[date] = None) -> BudgetStatus:
    """Evaluate a budget against the current month of the ledger.

    Args:
        budget: Budget to evaluate
        ledger: Confirmed transactions
        today: Day whose calendar month is evaluated (defaults to date.today())

    Returns:
        BudgetStatus with spent amount, percentage of the budget and state
    """
    month_start, month_end = month_bounds(today or date.today())
    spent = spend_for(ledger, budget.category_id, month_start, month_end)
    if budget.amount > 0:
        percentage = spent / budget.amount * HUNDRED
    else:
        percentage = Decimal("0")
    return BudgetStatus(
        budget=budget,
        spent=spent,
        percentage=percentage,
        state=classify(percentage, budget.alert_threshold),
    )


class BudgetAlertTracker:
    """Edge-triggered budget notifications.

    Remembers the last state seen for each budget and produces a notification
    only when a budget gets worse (OK to NEAR_LIMIT, NEAR_LIMIT to
    OVER_BUDGET, OK to OVER_BUDGET). Improvements, e.g. at the start of a new
    month, re-arm the alert.
    """

    def __init__(self, last_states: Optional[dict[str, BudgetState]] = None):
        self.last_states: dict[str, BudgetState] = dict(last_states or {})

    def check(self, statuses: Iterable[BudgetStatus], custom_categories=()) -> list[Notification]:
        notifications = []
        for status in statuses:
            budget_id = status.budget.id
            previous = self.last_states.get(budget_id, BudgetState.OK)
            self.last_states[budget_id] = status.state
            if status.state.severity > previous.severity:
                notifications.append(self._notification_for(status, custom_categories))
        return notifications

    def _notification_for(self, status: BudgetStatus, custom_categories) -> Notification:
        category = resolve_category(status.budget.category_id, custom_categories)
        percentage = status.percentage.quantize(Decimal("1"))
        if status.state == BudgetState.OVER_BUDGET:
            title = "Budget Exceeded"
            body = (
                f"You've spent ₹{status.spent:.2f} on {category.name}, "
                f"{percentage}% of your ₹{status.budget.amount:.2f} budget."
            )
        else:
            title = "Budget Alert"
            body = f"You've used {percentage}% of your {category.name} budget."
        return Notification(title=title, body=body, data={"budgetId": status.budget.id})


class BudgetService:
    """Service for managing budgets."""

    def __init__(self, store: TransactionStore):
        """Initialize budget service.

        Args:
            store: TransactionStore instance
        """
        self.store = store

    def set_budget(
        self,
        category_id: str,
        amount: str,
        alert_threshold: int = 80,
        start_date: Optional[date] = None,
    ) -> Budget:
        """Create a budget for a category, or update the existing one.

        One budget per category is kept by updating in place when a budget for
        the category already exists.

        Raises:
            ValidationError: If the category is empty, the amount is invalid or
                the threshold is outside 0-100
        """
        if not category_id:
            raise ValidationError("Please select a category")
        parsed_amount = parse_positive_amount(amount)
        if not 0 <= int(alert_threshold) <= 100:
            raise ValidationError("Alert threshold must be between 0 and 100")

        existing = self.get_budget_for_category(category_id)
        if existing is not None:
            budget = replace(existing, amount=parsed_amount, alert_threshold=int(alert_threshold))
            self.store.dispatch(Action(UPDATE_BUDGET, budget))
            return budget

        budget = Budget(
            id=new_id("budget_"),
            category_id=category_id,
            amount=parsed_amount,
            start_date=start_date or date.today(),
            alert_threshold=int(alert_threshold),
        )
        self.store.dispatch(Action(ADD_BUDGET, budget))
        return budget

    def get_budget_for_category(self, category_id: str) -> Optional[Budget]:
        for budget in self.store.state.budgets:
            if budget.category_id == category_id:
                return budget
        return None

    def list_budgets(self) -> list[Budget]:
        return list(self.store.state.budgets)

    def delete_budget(self, budget_id: str) -> None:
        """Delete a budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        if not any(b.id == budget_id for b in self.store.state.budgets):
            raise NotFoundError(budget_not_found(budget_id))
        self.store.dispatch(Action(DELETE_BUDGET, budget_id))

    def evaluate_all(self, today: Optional[date] = None) -> list[BudgetStatus]:
        """Evaluate every budget against the confirmed ledger."""
        ledger = self.store.state.transactions
        return [evaluate(budget, ledger, today=today) for budget in self.store.state.budgets]
