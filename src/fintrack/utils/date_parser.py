"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from fintrack.domain.errors import ValidationError


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this month", etc.

    Numeric dates are read day-first, as printed by Indian banks.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)
    if date_str == "this month":
        return today.replace(day=1)
    if date_str == "next month":
        return (today + relativedelta(months=1)).replace(day=1)

    # ISO dates are unambiguous; everything else is day-first
    dayfirst = not (len(date_str) >= 10 and date_str[4] == "-")
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: Optional[str], today: Optional[date] = None) -> date:
    """Parse a month selector ("2025-11", "this month", "last month") into its first day."""
    today = today or date.today()
    if not month_str:
        return today.replace(day=1)

    month_str = month_str.strip().lower()
    if len(month_str) == 7 and month_str[4] == "-":
        try:
            year, month = int(month_str[:4]), int(month_str[5:])
            return date(year, month, 1)
        except ValueError as e:
            raise ValidationError(f"Could not parse month '{month_str}': {e}")

    return parse_date(month_str, today=today).replace(day=1)
