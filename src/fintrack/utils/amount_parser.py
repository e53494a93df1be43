"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from fintrack.domain.errors import ValidationError


def parse_amount(amount_str: str, allow_negative: bool = False) -> Decimal:
    """Parse a user-entered amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹123.45"
    - "Rs. 1,234.56"
    - "INR 500"

    Negative amounts are rejected unless allowed: the direction of a
    transaction is carried by its type, never by the amount. Opening balances
    may be negative (an overdrawn account).

    Args:
        amount_str: Amount string
        allow_negative: Accept a leading minus sign

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed or is negative
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValidationError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Remove currency markers
    amount_str = re.sub(r"^(?:INR|Rs\.?)", "", amount_str, flags=re.IGNORECASE)
    amount_str = re.sub(r"[₹$€£¥]", "", amount_str)

    # Remove thousand separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if amount < 0 and not allow_negative:
        raise ValidationError(f"Amount must not be negative: {amount_str}")
    return amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that must be strictly greater than zero."""
    amount = parse_amount(amount_str)
    if amount == 0:
        raise ValidationError("Please enter a valid amount greater than zero")
    return amount
