"""Plain-text bank statement parser.

Works on the text extracted from a PDF statement (extraction itself happens
outside fintrack). Every line carrying a date and at least one amount with two
decimals is read as a transaction, e.g.::

    23/11/2025  UPI/123456/Merchant  500.00  12000.00 CR
    23-Nov-2025  NETFLIX  499.00 Dr
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from dateutil import parser as date_parser

from fintrack.domain.entities import TransactionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatementLine:
    """One transaction read from a statement."""

    date: date
    description: str
    amount: Decimal
    type: TransactionType
    raw: str


class StatementTextParser:
    """Line-oriented parser for statement text."""

    DATE_PATTERN = re.compile(r"(\d{2}[/-]\d{2}[/-]\d{4}|\d{2}-[A-Za-z]{3}-\d{4})")
    AMOUNT_PATTERN = re.compile(r"([\d,]+\.\d{2})")
    CREDIT_PATTERN = re.compile(r"\b(?:Cr|Credit)\b", re.IGNORECASE)
    MARKER_PATTERN = re.compile(r"\b(?:Dr|Cr|Debit|Credit)\b", re.IGNORECASE)

    MAX_DESCRIPTION_LENGTH = 50

    def parse(self, text: str) -> list[StatementLine]:
        """Parse all transaction lines from statement text."""
        lines = []
        for raw_line in (text or "").splitlines():
            parsed = self.parse_line(raw_line)
            if parsed is not None:
                lines.append(parsed)
        return lines

    def parse_line(self, line: str) -> Optional[StatementLine]:
        """Parse one statement line, or return None if it is not a transaction.

        The first amount on the line is the transaction amount; later ones are
        usually the running balance.
        """
        date_match = self.DATE_PATTERN.search(line)
        amounts = self.AMOUNT_PATTERN.findall(line)
        if date_match is None or not amounts:
            return None

        txn_date = self._parse_date(date_match.group(1))
        if txn_date is None:
            logger.debug("Skipping statement line with unreadable date: %s", line)
            return None

        try:
            amount = Decimal(amounts[0].replace(",", ""))
        except InvalidOperation:
            return None

        txn_type = TransactionType.INCOME if self.CREDIT_PATTERN.search(line) else TransactionType.EXPENSE

        description = line.replace(date_match.group(1), "", 1).replace(amounts[0], "", 1)
        description = self.MARKER_PATTERN.sub("", description)
        description = re.sub(r"\s+", " ", description).strip()

        return StatementLine(
            date=txn_date,
            description=description[: self.MAX_DESCRIPTION_LENGTH] or "Statement entry",
            amount=amount,
            type=txn_type,
            raw=line.strip(),
        )

    def _parse_date(self, value: str) -> Optional[date]:
        try:
            return date_parser.parse(value, dayfirst=True).date()
        except (ValueError, OverflowError):
            return None
