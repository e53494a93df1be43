"""Bank SMS transaction parser.

Turns the free-text body of a bank SMS into a draft transaction. The parser is
a best-effort classifier: anything that does not yield a usable amount comes
back as ``None`` rather than raising.

Extraction runs as an ordered sequence of independent stages (direction,
amount, last-4 digits, date, method, merchant). Each stage always returns a
value or ``None`` so it can be exercised on its own.

Example:
    >>> parser = SmsTransactionParser()
    >>> parsed = parser.parse("AXISBK", "INR 150.00 debited\\nA/c no. XX9900\\n"
    ...                       "16-11-25, 17:56:09\\nUPI/P2M/568615976445/SWIGGY FOOD")
    >>> parsed.merchant_name
    'SWIGGY FOOD'
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from fintrack.domain.entities import Transaction, TransactionType


OTP_PATTERN = re.compile(r"OTP|One Time Password|verification code", re.IGNORECASE)


def is_otp(body: str) -> bool:
    """Return True when the message is a one-time-password SMS."""
    return bool(OTP_PATTERN.search(body))


@dataclass(frozen=True)
class ParsedSms:
    """Structured result of parsing one bank SMS."""

    amount: Decimal
    type: TransactionType
    last4_digits: Optional[str]
    date: date
    merchant_name: str
    transaction_method: Optional[str]
    description: str

    def to_transaction(
        self,
        transaction_id: str,
        account_id: Optional[str],
        category: Optional[str] = None,
        original_sms: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Transaction:
        """Build a (pending) transaction from the parsed fields."""
        return Transaction(
            id=transaction_id,
            account_id=account_id,
            amount=self.amount,
            type=self.type,
            date=self.date,
            category=category,
            note=self.description,
            location=location,
            merchant_name=self.merchant_name,
            transaction_method=self.transaction_method,
            original_sms=original_sms,
            last4_digits=self.last4_digits,
        )


class SmsTransactionParser:
    """Parser for bank transaction SMS messages."""

    DEBIT_PATTERN = re.compile(r"spent|debited|paid", re.IGNORECASE)
    CREDIT_PATTERN = re.compile(r"credited|received|deposited", re.IGNORECASE)

    # The first INR/Rs figure in the body is taken as the transaction amount.
    # Templates that print "Avl Limit: INR X" before the amount are misread.
    AMOUNT_PATTERN = re.compile(r"(?:INR|Rs\.?)\s*([\d,]+\.?\d*)", re.IGNORECASE)

    LAST4_PATTERN = re.compile(r"(?:Card no\.|A/c no\.)\s*XX(\d{4})", re.IGNORECASE)

    DATE_PATTERNS = [
        re.compile(r"(\d{2}-\d{2}-\d{2})[,\s]+\d{2}:\d{2}:\d{2}"),  # 16-11-25, 17:56:09
        re.compile(r"on\s+(\d{2}-\d{2}-\d{2})\s+at", re.IGNORECASE),  # on 30-09-25 at
        re.compile(r"(\d{2}-\d{2}-\d{2})"),  # any DD-MM-YY
    ]

    METHODS = ["UPI", "NEFT", "IMPS", "Card", "RTGS"]

    UPI_MERCHANT_PATTERN = re.compile(r"UPI/[^/]+/[^/]+/([^\n\r]+)", re.IGNORECASE)
    SKIP_LINE_PATTERN = re.compile(
        r"Spent|Debited|INR|Rs\.|Card no|A/c no|Axis Bank|Avl Limit|Not you|SMS BLOCK",
        re.IGNORECASE,
    )
    DATE_LINE_PATTERN = re.compile(r"\d{2}-\d{2}-\d{2}")
    INFO_PATTERN = re.compile(r"Info\s*-\s*([^\n\r]+)", re.IGNORECASE)
    INFO_NAME_PATTERN = re.compile(r"(?:NEFT|IMPS|UPI)/[^/]+/([^\s.]+)", re.IGNORECASE)

    DEFAULT_MERCHANT = "Unknown"
    MAX_MERCHANT_LENGTH = 50
    MAX_MERCHANT_LINE_LENGTH = 100

    def parse(self, sender_id: str, body: str, today: Optional[date] = None) -> Optional[ParsedSms]:
        """Parse an SMS body into a draft transaction.

        Args:
            sender_id: SMS sender address (sender filtering is done by the caller)
            body: SMS text
            today: Date used when the body carries no date (defaults to date.today())

        Returns:
            ParsedSms, or None if the message is not a usable transaction SMS
        """
        if not body or is_otp(body):
            return None

        is_debit, is_credit = self._find_direction(body)
        if not is_debit and not is_credit:
            return None

        amount = self._find_amount(body)
        if amount is None:
            return None

        method = self._find_transaction_method(body)
        merchant = self._find_merchant(body, is_debit)

        return ParsedSms(
            amount=amount,
            type=TransactionType.INCOME if is_credit else TransactionType.EXPENSE,
            last4_digits=self._find_last4_digits(body),
            date=self._find_date(body) or today or date.today(),
            merchant_name=merchant,
            transaction_method=method,
            description=f"{method or 'Transaction'} - {merchant}",
        )

    def _find_direction(self, body: str) -> tuple[bool, bool]:
        """Return (is_debit, is_credit) keyword flags."""
        return bool(self.DEBIT_PATTERN.search(body)), bool(self.CREDIT_PATTERN.search(body))

    def _find_amount(self, body: str) -> Optional[Decimal]:
        match = self.AMOUNT_PATTERN.search(body)
        if match is None:
            return None

        try:
            amount = Decimal(match.group(1).replace(",", ""))
        except InvalidOperation:
            return None
        return amount if amount.is_finite() else None

    def _find_last4_digits(self, body: str) -> Optional[str]:
        match = self.LAST4_PATTERN.search(body)
        return match.group(1) if match else None

    def _find_date(self, body: str) -> Optional[date]:
        """Find the transaction date, trying the most specific pattern first.

        DD-MM-YY values are read as 20YY. A match that is not a real calendar
        date falls through to the next pattern.
        """
        for pattern in self.DATE_PATTERNS:
            match = pattern.search(body)
            if match is None:
                continue
            day, month, year = match.group(1).split("-")
            try:
                return date(2000 + int(year), int(month), int(day))
            except ValueError:
                continue
        return None

    def _find_transaction_method(self, body: str) -> Optional[str]:
        for method in self.METHODS:
            if re.search(method, body, re.IGNORECASE):
                return method
        return None

    def _find_merchant(self, body: str, is_debit: bool) -> str:
        if is_debit:
            merchant = self._find_debit_merchant(body)
        else:
            merchant = self._find_credit_merchant(body)
        return self._clean_merchant(merchant or self.DEFAULT_MERCHANT)

    def _find_debit_merchant(self, body: str) -> Optional[str]:
        upi_match = self.UPI_MERCHANT_PATTERN.search(body)
        if upi_match:
            return upi_match.group(1).strip()

        # Card templates put the merchant on its own line between the
        # date/time line and the "Avl Limit" line.
        lines = [line.strip() for line in re.split(r"[\n\r]+", body)]
        for line in lines:
            if not line:
                continue
            if self.SKIP_LINE_PATTERN.search(line) or self.DATE_LINE_PATTERN.search(line):
                continue
            if len(line) < self.MAX_MERCHANT_LINE_LENGTH:
                return line
        return None

    def _find_credit_merchant(self, body: str) -> Optional[str]:
        info_match = self.INFO_PATTERN.search(body)
        if info_match is None:
            return None

        info_text = info_match.group(1).strip()
        name_match = self.INFO_NAME_PATTERN.search(info_text)
        if name_match:
            return name_match.group(1).strip()
        return info_text[: self.MAX_MERCHANT_LENGTH]

    def _clean_merchant(self, merchant: str) -> str:
        return re.sub(r"\s+", " ", merchant)[: self.MAX_MERCHANT_LENGTH].strip()
