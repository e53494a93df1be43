"""Category catalog and category domain service.

Predefined categories are code-defined and immutable. Custom categories live in
the store and are looked up after the predefined ones.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from fintrack.domain.entities import Category, CategoryType, Transaction, TransactionType
from fintrack.domain.errors import NotFoundError, ValidationError, category_not_found
from fintrack.domain.store import (
    ADD_CUSTOM_CATEGORY,
    DELETE_CUSTOM_CATEGORY,
    UPDATE_CUSTOM_CATEGORY,
    Action,
    TransactionStore,
)
from fintrack.utils.ids import new_id


def _expense(id: str, name: str, emoji: str, color: str) -> Category:
    return Category(id=id, name=name, emoji=emoji, color=color, type=CategoryType.EXPENSE)


def _income(id: str, name: str, emoji: str, color: str) -> Category:
    return Category(id=id, name=name, emoji=emoji, color=color, type=CategoryType.INCOME)


EXPENSE_CATEGORIES = (
    _expense("food_dining", "Food & Dining", "🍔", "#FF6B6B"),
    _expense("groceries", "Groceries", "🛒", "#4ECDC4"),
    _expense("transportation", "Transportation", "🚗", "#45B7D1"),
    _expense("housing", "Housing & Rent", "🏠", "#96CEB4"),
    _expense("phone_internet", "Phone & Internet", "📱", "#FFEAA7"),
    _expense("utilities", "Utilities", "⚡", "#DFE6E9"),
    _expense("shopping", "Shopping", "🛍️", "#FD79A8"),
    _expense("entertainment", "Entertainment", "🎬", "#A29BFE"),
    _expense("healthcare", "Healthcare", "🏥", "#74B9FF"),
    _expense("pharmacy", "Pharmacy", "💊", "#FF7675"),
    _expense("education", "Education", "🎓", "#6C5CE7"),
    _expense("fitness", "Fitness & Sports", "🏋️", "#00B894"),
    _expense("travel", "Travel", "✈️", "#0984E3"),
    _expense("gifts", "Gifts & Donations", "🎁", "#E17055"),
    _expense("personal_care", "Personal Care", "💇", "#FDCB6E"),
    _expense("pets", "Pets", "🐕", "#F39C12"),
    _expense("maintenance", "Maintenance", "🔧", "#95A5A6"),
    _expense("bills_fees", "Bills & Fees", "📄", "#636E72"),
    _expense("credit_payment", "Credit Card Payment", "💳", "#2D3436"),
    _expense("investments", "Investments", "📊", "#00B894"),
    _expense("gaming", "Gaming", "🎮", "#6C5CE7"),
    _expense("coffee_snacks", "Coffee & Snacks", "☕", "#D63031"),
    _expense("taxi", "Taxi & Ride Share", "🚕", "#FDCB6E"),
    _expense("fuel", "Fuel", "⛽", "#E17055"),
    _expense("parking", "Parking", "🅿️", "#74B9FF"),
    _expense("subscriptions", "Subscriptions", "🎵", "#A29BFE"),
    _expense("books_media", "Books & Media", "📚", "#55EFC4"),
    _expense("kids_family", "Kids & Family", "👶", "#FD79A8"),
    _expense("work_expenses", "Work Expenses", "💼", "#636E72"),
    _expense("hobbies", "Hobbies", "🎨", "#FF7675"),
    _expense("other_expense", "Other", "🌟", "#B2BEC3"),
)

INCOME_CATEGORIES = (
    _income("salary", "Salary", "💼", "#00B894"),
    _income("business", "Business Income", "💵", "#00CEC9"),
    _income("gifts_received", "Gifts Received", "🎁", "#FD79A8"),
    _income("investment_income", "Investment Returns", "📈", "#6C5CE7"),
    _income("bonus", "Bonus", "💰", "#FDCB6E"),
    _income("awards", "Awards", "🏆", "#F39C12"),
    _income("refunds", "Refunds", "💸", "#74B9FF"),
    _income("transfers", "Transfers", "🔄", "#DFE6E9"),
    _income("other_income", "Other Income", "🌟", "#B2BEC3"),
)

# Category assigned to drafts created from SMS until the user picks one
SMS_AUTO_CATEGORY = "sms_auto"

FALLBACK_DISPLAY = Category(
    id="other_expense", name="Other", emoji="🌟", color="#B2BEC3", type=CategoryType.EXPENSE
)


def all_categories() -> list[Category]:
    """Return every predefined category, income first."""
    return [*INCOME_CATEGORIES, *EXPENSE_CATEGORIES]


def categories_by_type(category_type: CategoryType) -> list[Category]:
    if category_type == CategoryType.INCOME:
        return list(INCOME_CATEGORIES)
    return list(EXPENSE_CATEGORIES)


def get_category(category_id: Optional[str], custom: Sequence[Category] = ()) -> Optional[Category]:
    """Look up a category by ID, predefined first, then custom."""
    if not category_id:
        return None
    for cat in all_categories():
        if cat.id == category_id:
            return cat
    for cat in custom or ():
        if cat.id == category_id:
            return cat
    return None


def resolve_category(category_id: Optional[str], custom: Sequence[Category] = ()) -> Category:
    """Return display info for a category ID, falling back to "Other"."""
    return get_category(category_id, custom) or FALLBACK_DISPLAY


def is_valid_category(category_id: Optional[str], custom: Sequence[Category] = ()) -> bool:
    return get_category(category_id, custom) is not None


def search_categories(
    query: str,
    category_type: Optional[CategoryType] = None,
    custom: Sequence[Category] = (),
) -> list[Category]:
    """Find categories whose name contains the query or whose emoji matches it."""
    if category_type is not None:
        candidates = categories_by_type(category_type)
        candidates += [c for c in custom or () if c.type == category_type]
    else:
        candidates = all_categories() + list(custom or ())

    lowered = query.lower()
    return [
        cat
        for cat in candidates
        if lowered in cat.name.lower() or (query and query in cat.emoji)
    ]


def create_custom_category(name: str, emoji: str, color: str, category_type: CategoryType) -> Category:
    """Build a new custom category with a fresh ID."""
    return Category(
        id=new_id("custom_"),
        name=name,
        emoji=emoji,
        color=color,
        type=category_type,
        is_custom=True,
        is_active=True,
    )


def top_categories(ledger: Iterable[Transaction], limit: int = 5) -> list[tuple[str, Decimal]]:
    """Return the categories with the highest expense totals, largest first."""
    totals: dict[str, Decimal] = {}
    for txn in ledger or ():
        if txn is None or not txn.category:
            continue
        if TransactionType.parse(txn.type) != TransactionType.EXPENSE:
            continue
        totals[txn.category] = totals.get(txn.category, Decimal("0")) + txn.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def category_spending_summary(
    ledger: Iterable[Transaction], custom: Sequence[Category] = ()
) -> list[dict]:
    """Aggregate income, expense and count per known category.

    Transactions whose category is unknown are left out. Payments count as
    outgoing money here, as in the per-category breakdown of the ledger.
    """
    summary: dict[str, dict] = {}
    for txn in ledger or ():
        if txn is None or not txn.category:
            continue
        category = get_category(txn.category, custom)
        if category is None:
            continue

        entry = summary.setdefault(
            txn.category,
            {"category": category, "income": Decimal("0"), "expense": Decimal("0"), "count": 0},
        )
        if TransactionType.parse(txn.type) == TransactionType.INCOME:
            entry["income"] += txn.amount
        else:
            entry["expense"] += txn.amount
        entry["count"] += 1

    return list(summary.values())


class CategoryService:
    """Service for managing custom categories."""

    def __init__(self, store: TransactionStore):
        """Initialize category service.

        Args:
            store: TransactionStore instance
        """
        self.store = store

    @property
    def custom_categories(self) -> tuple[Category, ...]:
        return self.store.state.custom_categories

    def list_categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        """List predefined and active custom categories."""
        custom = [c for c in self.custom_categories if c.is_active]
        if category_type is None:
            return all_categories() + custom
        return categories_by_type(category_type) + [c for c in custom if c.type == category_type]

    def get_category(self, category_id: str) -> Optional[Category]:
        return get_category(category_id, self.custom_categories)

    def resolve(self, category_id: Optional[str]) -> Category:
        return resolve_category(category_id, self.custom_categories)

    def search(self, query: str, category_type: Optional[CategoryType] = None) -> list[Category]:
        return search_categories(query, category_type, self.custom_categories)

    def create_category(
        self, name: str, emoji: str = "🌟", color: str = "#B2BEC3",
        category_type: CategoryType = CategoryType.EXPENSE,
    ) -> Category:
        """Create a custom category.

        Raises:
            ValidationError: If the name is empty
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")

        category = create_custom_category(name.strip(), emoji, color, category_type)
        self.store.dispatch(Action(ADD_CUSTOM_CATEGORY, category))
        return category

    def set_active(self, category_id: str, is_active: bool) -> None:
        category = self._get_custom(category_id)
        self.store.dispatch(
            Action(
                UPDATE_CUSTOM_CATEGORY,
                replace(category, is_active=is_active),
            )
        )

    def delete_category(self, category_id: str) -> None:
        """Delete a custom category. Predefined categories cannot be deleted.

        Raises:
            NotFoundError: If no custom category has this ID
        """
        self._get_custom(category_id)
        self.store.dispatch(Action(DELETE_CUSTOM_CATEGORY, category_id))

    def _get_custom(self, category_id: str) -> Category:
        for category in self.custom_categories:
            if category.id == category_id:
                return category
        raise NotFoundError(category_not_found(category_id))
