"""Domain layer for fintrack application."""

from fintrack.domain.account import AccountService
from fintrack.domain.budget import BudgetService
from fintrack.domain.card_group import CardGroupService
from fintrack.domain.category import CategoryService
from fintrack.domain.ingestion import SmsIngestionService
from fintrack.domain.store import TransactionStore
from fintrack.domain.transaction import TransactionService

__all__ = [
    "AccountService",
    "BudgetService",
    "CardGroupService",
    "CategoryService",
    "SmsIngestionService",
    "TransactionStore",
    "TransactionService",
]
