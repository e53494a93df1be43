"""Credit card accounting.

Debt, available credit and utilization for a single card or for a group of
cards sharing one limit. Every view that shows these numbers goes through
this module so they always agree.

Debt is ``starting balance + sum(expenses) - sum(payments)`` over the
transactions booked on the card(s). Income and any other type are ignored.
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from fintrack.domain.entities import (
    Account,
    CardGroup,
    CreditSummary,
    Transaction,
    TransactionType,
)

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def _type_of(transaction: Transaction) -> Optional[TransactionType]:
    try:
        return TransactionType.parse(transaction.type)
    except ValueError:
        return None


def spent_for(
    ledger: Iterable[Transaction],
    card_ids: Iterable[str],
    starting_balance: Decimal = ZERO,
) -> Decimal:
    """Return the running debt for a card or card group.

    Args:
        ledger: Transactions to scan
        card_ids: IDs of the card(s) whose transactions count
        starting_balance: Initial debt of the card or group

    Returns:
        Debt as a Decimal (may exceed the limit or go negative on overpayment)
    """
    ids = set(card_ids or ())
    total = Decimal(starting_balance or 0)
    for txn in ledger or ():
        if txn is None or txn.account_id not in ids:
            continue
        txn_type = _type_of(txn)
        if txn_type == TransactionType.EXPENSE:
            total += txn.amount
        elif txn_type == TransactionType.PAYMENT:
            total -= txn.amount
    return total


def available_credit(
    limit: Decimal,
    ledger: Iterable[Transaction],
    card_ids: Iterable[str],
    starting_balance: Decimal = ZERO,
) -> Decimal:
    """Return ``limit - debt``, never below zero."""
    spent = spent_for(ledger, card_ids, starting_balance)
    return max(ZERO, Decimal(limit or 0) - spent)


def utilization(
    limit: Decimal,
    ledger: Iterable[Transaction],
    card_ids: Iterable[str],
    starting_balance: Decimal = ZERO,
) -> Decimal:
    """Return debt as a percentage of the limit, capped at 100.

    A missing or non-positive limit gives 0.
    """
    if not limit or limit <= 0:
        return ZERO
    spent = spent_for(ledger, card_ids, starting_balance)
    return min(HUNDRED, HUNDRED * spent / Decimal(limit))


def cards_in_group(accounts: Sequence[Account], group_id: Optional[str]) -> list[Account]:
    """Return the accounts that belong to a card group, in stored order."""
    if not accounts or not group_id:
        return []
    return [acc for acc in accounts if acc is not None and acc.card_group == group_id]


def card_summary(account: Account, ledger: Iterable[Transaction]) -> CreditSummary:
    """Summarize a single credit card against its own limit."""
    ledger = list(ledger or ())
    limit = account.credit_limit or ZERO
    debt = account.starting_balance.amount
    return CreditSummary(
        limit=limit,
        spent=spent_for(ledger, [account.id], debt),
        available=available_credit(limit, ledger, [account.id], debt),
        utilization=utilization(limit, ledger, [account.id], debt),
    )


def group_summary(
    group: CardGroup, accounts: Sequence[Account], ledger: Iterable[Transaction]
) -> CreditSummary:
    """Summarize a card group against its shared limit."""
    ledger = list(ledger or ())
    card_ids = [acc.id for acc in cards_in_group(accounts, group.id)]
    limit = group.shared_credit_limit
    debt = group.starting_balance.amount
    return CreditSummary(
        limit=limit,
        spent=spent_for(ledger, card_ids, debt),
        available=available_credit(limit, ledger, card_ids, debt),
        utilization=utilization(limit, ledger, card_ids, debt),
    )


def account_balance(account: Account, ledger: Iterable[Transaction]) -> Decimal:
    """Return the balance shown for an account.

    Bank, cash and other accounts: opening balance + income - (expenses and
    payments). Credit cards: credit limit - current debt, unclamped, so an
    overspent card shows a negative balance.
    """
    ledger = list(ledger or ())
    if account.is_credit_card:
        debt = spent_for(ledger, [account.id], account.starting_balance.amount)
        return (account.credit_limit or ZERO) - debt

    balance = account.starting_balance.amount
    for txn in ledger:
        if txn is None or txn.account_id != account.id:
            continue
        txn_type = _type_of(txn)
        if txn_type == TransactionType.INCOME:
            balance += txn.amount
        elif txn_type in (TransactionType.EXPENSE, TransactionType.PAYMENT):
            balance -= txn.amount
    return balance
