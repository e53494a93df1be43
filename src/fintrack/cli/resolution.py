"""CLI helpers for resolving accounts and card groups by name or ID."""

from __future__ import annotations

import click
from fintrack.domain.account import AccountService
from fintrack.domain.card_group import CardGroupService
from fintrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, account_service: AccountService, account: str) -> str:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_group_or_exit(ctx: click.Context, group_service: CardGroupService, group: str) -> str:
    """Resolve card group name or ID, or exit with a CLI error."""
    found = group_service.get_group(group)
    if found is None:
        found = next((g for g in group_service.list_groups() if g.name == group), None)
    if found is None:
        click.echo(f"Error: Card group '{group}' not found", err=True)
        ctx.exit(1)
    return found.id
