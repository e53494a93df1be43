"""Utility for resolving account names to IDs."""

from fintrack.domain.errors import NotFoundError


def resolve_account(account_service, account: str) -> str:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account ID or account name

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    # IDs win over names
    account_obj = account_service.get_account(account)
    if account_obj is not None:
        return account_obj.id

    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
