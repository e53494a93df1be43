"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
how they are persisted. The persisted snapshot is mapped onto these entities
in ``fintrack.database.mappers``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from fintrack.domain.errors import ValidationError


class AccountType(str, Enum):
    """Kind of account."""

    BANK = "BANK"
    CREDIT_CARD = "CREDIT_CARD"
    CASH = "CASH"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str) -> "AccountType":
        """Parse an account type name, case-insensitively."""
        try:
            return cls(value.strip().upper().replace("-", "_"))
        except ValueError:
            names = ", ".join(t.value for t in cls)
            raise ValidationError(f"Unknown account type '{value}'. Expected one of: {names}")


class TransactionType(str, Enum):
    """Direction of a transaction.

    PAYMENT is an expense-like movement that reduces credit card debt. It is
    kept out of expense aggregates.
    """

    INCOME = "income"
    EXPENSE = "expense"
    PAYMENT = "payment"

    @classmethod
    def parse(cls, value: Union[str, "TransactionType"]) -> "TransactionType":
        """Parse a transaction type, case-insensitively."""
        if isinstance(value, TransactionType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown transaction type '{value}'. Expected income, expense or payment"
            )


class CategoryType(str, Enum):
    """Whether a category classifies income or expenses."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class BudgetPeriod(str, Enum):
    MONTHLY = "MONTHLY"


class BudgetState(str, Enum):
    """Budget health, ordered from best to worst."""

    OK = "OK"
    NEAR_LIMIT = "NEAR_LIMIT"
    OVER_BUDGET = "OVER_BUDGET"

    @property
    def severity(self) -> int:
        return _BUDGET_SEVERITY[self]


_BUDGET_SEVERITY = {
    BudgetState.OK: 0,
    BudgetState.NEAR_LIMIT: 1,
    BudgetState.OVER_BUDGET: 2,
}


@dataclass(frozen=True)
class OpeningBalance:
    """Cash held when a bank, cash or other account started being tracked."""

    amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class InitialDebt:
    """Money owed on a credit card when it started being tracked.

    Positive means debt. This is never a cash balance.
    """

    amount: Decimal = Decimal("0")


StartingBalance = Union[OpeningBalance, InitialDebt]


def starting_balance_for(account_type: AccountType, amount: Decimal) -> StartingBalance:
    """Wrap a raw starting amount in the type matching the account type."""
    if account_type == AccountType.CREDIT_CARD:
        return InitialDebt(amount)
    return OpeningBalance(amount)


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: str
    name: str
    type: AccountType
    starting_balance: StartingBalance = field(default_factory=OpeningBalance)
    credit_limit: Optional[Decimal] = None
    last4_digits: Optional[str] = None
    card_group: Optional[str] = None
    currency: str = "INR"

    def __post_init__(self):
        expected = InitialDebt if self.type == AccountType.CREDIT_CARD else OpeningBalance
        if not isinstance(self.starting_balance, expected):
            raise ValidationError(
                f"Account '{self.name}' of type {self.type.value} needs a "
                f"{expected.__name__} starting balance"
            )

    @property
    def is_credit_card(self) -> bool:
        return self.type == AccountType.CREDIT_CARD


@dataclass(frozen=True)
class CardGroup:
    """Credit cards sharing one aggregate credit limit.

    Members point at the group through ``Account.card_group``; the group
    itself keeps no member list.
    """

    id: str
    name: str
    shared_credit_limit: Decimal
    starting_balance: InitialDebt = field(default_factory=InitialDebt)


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity. Also used for pending drafts."""

    id: str
    account_id: Optional[str]
    amount: Decimal
    type: TransactionType
    date: date
    category: Optional[str] = None
    note: Optional[str] = None
    location: Optional[str] = None
    merchant_name: Optional[str] = None
    transaction_method: Optional[str] = None
    original_sms: Optional[str] = None
    last4_digits: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity (predefined or custom)."""

    id: str
    name: str
    emoji: str
    color: str
    type: CategoryType
    is_custom: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit for one category."""

    id: str
    category_id: str
    amount: Decimal
    start_date: date
    alert_threshold: int = 80
    period: BudgetPeriod = BudgetPeriod.MONTHLY


@dataclass(frozen=True)
class BudgetStatus:
    """Result of evaluating a budget against the ledger."""

    budget: Budget
    spent: Decimal
    percentage: Decimal
    state: BudgetState


@dataclass(frozen=True)
class CreditSummary:
    """Debt, available credit and utilization for a card or card group."""

    limit: Decimal
    spent: Decimal
    available: Decimal
    utilization: Decimal


@dataclass(frozen=True)
class Notification:
    """Local notification event handed to the delivery collaborator."""

    title: str
    body: str
    data: dict = field(default_factory=dict)
