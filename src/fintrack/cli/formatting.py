"""Text formatting helpers for CLI output."""

from decimal import Decimal

from fintrack.domain.category import resolve_category
from fintrack.domain.entities import Transaction


def format_money(amount: Decimal, currency: str = "INR") -> str:
    """Format an amount with two decimals and thousands separators."""
    symbol = "₹" if currency == "INR" else f"{currency} "
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value:.1f}%"


def format_transaction(txn: Transaction, account_name: str, custom_categories=()) -> str:
    """One-line rendering of a transaction."""
    category = resolve_category(txn.category, custom_categories)
    label = txn.merchant_name or txn.note or ""
    return (
        f"{txn.id} | {txn.date.isoformat()} | {txn.type.value:7s} | "
        f"{format_money(txn.amount):>14s} | {account_name:15.15s} | "
        f"{category.emoji} {category.name:15.15s} | {label}"
    )
