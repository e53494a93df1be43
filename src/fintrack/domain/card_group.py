"""Card group domain service."""

from dataclasses import replace
from typing import Optional

from fintrack.domain.credit import cards_in_group, group_summary
from fintrack.domain.entities import Account, CardGroup, CreditSummary, InitialDebt
from fintrack.domain.errors import NotFoundError, ValidationError, card_group_not_found
from fintrack.domain.store import (
    ADD_CARD_GROUP,
    DELETE_CARD_GROUP,
    UPDATE_CARD_GROUP,
    Action,
    TransactionStore,
)
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.ids import new_id


class CardGroupService:
    """Service for managing groups of credit cards that share one limit."""

    def __init__(self, store: TransactionStore):
        """Initialize card group service.

        Args:
            store: TransactionStore instance
        """
        self.store = store

    def create_group(self, name: str, shared_credit_limit: str, starting_balance: str = "0") -> CardGroup:
        """Create a card group.

        Args:
            name: Group name
            shared_credit_limit: Limit shared by all member cards
            starting_balance: Initial aggregate debt of the group

        Raises:
            ValidationError: If the name is empty or an amount is invalid
        """
        if not name or not name.strip():
            raise ValidationError("Card group name is required")

        group = CardGroup(
            id=new_id("group_"),
            name=name.strip(),
            shared_credit_limit=parse_amount(shared_credit_limit),
            starting_balance=InitialDebt(parse_amount(starting_balance or "0")),
        )
        self.store.dispatch(Action(ADD_CARD_GROUP, group))
        return group

    def get_group(self, group_id: str) -> Optional[CardGroup]:
        for group in self.store.state.card_groups:
            if group.id == group_id:
                return group
        return None

    def list_groups(self) -> list[CardGroup]:
        return list(self.store.state.card_groups)

    def update_group(
        self,
        group_id: str,
        name: Optional[str] = None,
        shared_credit_limit: Optional[str] = None,
        starting_balance: Optional[str] = None,
    ) -> CardGroup:
        """Update group fields. Fields left as None are not changed.

        Raises:
            NotFoundError: If the group doesn't exist
        """
        group = self._require(group_id)
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Card group name is required")
            changes["name"] = name.strip()
        if shared_credit_limit is not None:
            changes["shared_credit_limit"] = parse_amount(shared_credit_limit)
        if starting_balance is not None:
            changes["starting_balance"] = InitialDebt(parse_amount(starting_balance))

        updated = replace(group, **changes)
        self.store.dispatch(Action(UPDATE_CARD_GROUP, updated))
        return updated

    def delete_group(self, group_id: str) -> None:
        """Delete a group. Member cards are ungrouped, never deleted.

        Raises:
            NotFoundError: If the group doesn't exist
        """
        self._require(group_id)
        self.store.dispatch(Action(DELETE_CARD_GROUP, group_id))

    def members(self, group_id: str) -> list[Account]:
        return cards_in_group(self.store.state.accounts, group_id)

    def summary(self, group_id: str) -> CreditSummary:
        """Debt, available credit and utilization of the group's shared limit."""
        group = self._require(group_id)
        return group_summary(group, self.store.state.accounts, self.store.state.transactions)

    def _require(self, group_id: str) -> CardGroup:
        group = self.get_group(group_id)
        if group is None:
            raise NotFoundError(card_group_not_found(group_id))
        return group
