"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date, parse_month
from fintrack.utils.amount_parser import parse_amount, parse_positive_amount
from fintrack.utils.account_resolver import resolve_account
from fintrack.utils.ids import new_id

__all__ = [
    "parse_date",
    "parse_month",
    "parse_amount",
    "parse_positive_amount",
    "resolve_account",
    "new_id",
]
