"""Monthly income and expense summary."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from fintrack.domain.budget import month_bounds
from fintrack.domain.entities import Transaction, TransactionType

UNCATEGORIZED = "uncategorized"
TOP_CATEGORY_COUNT = 5


@dataclass(frozen=True)
class CategoryShare:
    """Expense total of one category and its share of all expenses."""

    category_id: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class MonthlySummary:
    """Totals for one calendar month."""

    month_start: date
    income: Decimal
    expense: Decimal
    net: Decimal
    top_categories: tuple[CategoryShare, ...]


def monthly_summary(ledger: Iterable[Transaction], day: Optional[date] = None) -> MonthlySummary:
    """Summarize the calendar month containing ``day``.

    Payments move money between the user's own accounts and are left out of
    both income and expense.

    Args:
        ledger: Confirmed transactions
        day: Any day of the month to summarize (defaults to today)

    Returns:
        MonthlySummary with the top five expense categories, largest first
    """
    month_start, month_end = month_bounds(day or date.today())

    income = Decimal("0")
    expense = Decimal("0")
    by_category: dict[str, Decimal] = {}
    for txn in ledger or ():
        if txn is None or not (month_start <= txn.date <= month_end):
            continue
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        elif txn.type == TransactionType.EXPENSE:
            expense += txn.amount
            key = txn.category or UNCATEGORIZED
            by_category[key] = by_category.get(key, Decimal("0")) + txn.amount

    ranked = sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    shares = tuple(
        CategoryShare(
            category_id=category_id,
            amount=amount,
            percentage=(amount * 100 / expense) if expense > 0 else Decimal("0"),
        )
        for category_id, amount in ranked[:TOP_CATEGORY_COUNT]
    )

    return MonthlySummary(
        month_start=month_start,
        income=income,
        expense=expense,
        net=income - expense,
        top_categories=shares,
    )
