"""Tests for AccountService and CardGroupService."""

from decimal import Decimal

import pytest

from fintrack.domain.entities import AccountType, InitialDebt, OpeningBalance, TransactionType
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError


class TestCreateAccount:
    def test_bank_account_gets_opening_balance(self, account_service):
        acc = account_service.create_account("Axis Savings", "bank", starting_balance="25,000")

        assert acc.type == AccountType.BANK
        assert acc.starting_balance == OpeningBalance(Decimal("25000"))
        assert acc.currency == "INR"
        assert account_service.get_account(acc.id) == acc

    def test_credit_card_gets_initial_debt(self, account_service):
        acc = account_service.create_account(
            "Regalia", "credit-card", starting_balance="2000", credit_limit="10000"
        )

        assert acc.type == AccountType.CREDIT_CARD
        assert acc.starting_balance == InitialDebt(Decimal("2000"))
        assert acc.credit_limit == Decimal("10000")
        assert acc.is_credit_card

    def test_bank_account_may_start_overdrawn(self, account_service):
        acc = account_service.create_account("Overdraft", "BANK", starting_balance="-500")
        assert acc.starting_balance.amount == Decimal("-500")

    def test_card_debt_cannot_be_negative(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account("Card", "CREDIT_CARD", starting_balance="-1")

    def test_limit_only_for_credit_cards(self, account_service):
        with pytest.raises(ValidationError, match="Only credit cards"):
            account_service.create_account("Cash", "CASH", credit_limit="100")

    def test_duplicate_name(self, account_service):
        account_service.create_account("Wallet", "CASH")
        with pytest.raises(ConflictError):
            account_service.create_account("Wallet", "CASH")

    def test_empty_name(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account("  ", "CASH")

    def test_unknown_type(self, account_service):
        with pytest.raises(ValidationError, match="Unknown account type"):
            account_service.create_account("Crypto", "WALLET")

    @pytest.mark.parametrize("last4", ["123", "12345", "12a4"])
    def test_last4_validated(self, account_service, last4):
        with pytest.raises(ValidationError):
            account_service.create_account("Card", "BANK", last4_digits=last4)


class TestUpdateAccount:
    def test_rename(self, account_service, sample_account):
        updated = account_service.update_account(sample_account.id, name="Axis Salary")
        assert updated.name == "Axis Salary"
        assert account_service.get_account(sample_account.id).name == "Axis Salary"

    def test_rename_conflict(self, account_service, sample_account, sample_card):
        with pytest.raises(ConflictError):
            account_service.update_account(sample_account.id, name=sample_card.name)

    def test_update_card_debt_keeps_type(self, account_service, sample_card):
        updated = account_service.update_account(sample_card.id, starting_balance="3000")
        assert updated.starting_balance == InitialDebt(Decimal("3000"))

    def test_update_missing(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.update_account("missing", name="X")


class TestFindByLast4:
    def test_match(self, account_service, sample_account, sample_card):
        assert account_service.find_by_last4("4321") == sample_card
        assert account_service.find_by_last4("0000") is None
        assert account_service.find_by_last4(None) is None


class TestDeleteAccount:
    def test_cascades_transactions(self, account_service, transaction_service, sample_account, sample_card):
        transaction_service.create_transaction(sample_account.id, "10", "expense")
        transaction_service.create_transaction(sample_account.id, "20", "expense")
        kept = transaction_service.create_transaction(sample_card.id, "30", "expense")

        removed = account_service.delete_account(sample_account.id)

        assert removed == 2
        assert account_service.get_account(sample_account.id) is None
        assert transaction_service.list_transactions() == [kept]

    def test_delete_missing(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.delete_account("missing")


class TestBalances:
    def test_bank_balance(self, account_service, transaction_service, sample_account):
        transaction_service.create_transaction(sample_account.id, "5000", "income")
        transaction_service.create_transaction(sample_account.id, "1500", "expense")

        assert account_service.get_balance(sample_account.id) == Decimal("13500")

    def test_card_balance_is_available_credit(self, account_service, transaction_service, sample_card):
        transaction_service.create_transaction(sample_card.id, "500", TransactionType.EXPENSE)
        transaction_service.create_transaction(sample_card.id, "1000", TransactionType.PAYMENT)

        assert account_service.get_balance(sample_card.id) == Decimal("8500")

    def test_total_balance(self, account_service, sample_account, sample_card):
        # 10000 opening + (10000 limit - 2000 debt)
        assert account_service.total_balance() == Decimal("18000")


class TestCardGroups:
    def test_create_and_assign(self, card_group_service, account_service, sample_card):
        group = card_group_service.create_group("HDFC Cards", "50000", starting_balance="1000")
        account_service.assign_card_group(sample_card.id, group.id)

        assert [c.id for c in card_group_service.members(group.id)] == [sample_card.id]
        summary = card_group_service.summary(group.id)
        assert summary.limit == Decimal("50000")
        assert summary.spent == Decimal("1000")
        assert summary.available == Decimal("49000")
        assert summary.utilization == Decimal("2")

    def test_only_credit_cards_join_groups(self, card_group_service, account_service, sample_account):
        group = card_group_service.create_group("G", "1000")
        with pytest.raises(ValidationError):
            account_service.assign_card_group(sample_account.id, group.id)

    def test_assign_to_missing_group(self, account_service, sample_card):
        with pytest.raises(NotFoundError):
            account_service.assign_card_group(sample_card.id, "missing")

    def test_delete_group_ungroups_cards(self, card_group_service, account_service, sample_card):
        group = card_group_service.create_group("HDFC Cards", "50000")
        account_service.assign_card_group(sample_card.id, group.id)

        card_group_service.delete_group(group.id)

        card = account_service.get_account(sample_card.id)
        assert card is not None
        assert card.card_group is None
        assert card_group_service.list_groups() == []

    def test_update_group(self, card_group_service):
        group = card_group_service.create_group("Old", "1000")
        updated = card_group_service.update_group(group.id, name="New", shared_credit_limit="2000")
        assert updated.name == "New"
        assert updated.shared_credit_limit == Decimal("2000")

    def test_group_name_required(self, card_group_service):
        with pytest.raises(ValidationError):
            card_group_service.create_group("", "1000")
