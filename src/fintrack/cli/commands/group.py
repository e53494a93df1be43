"""Card group commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_money, format_percentage
from fintrack.cli.resolution import resolve_account_or_exit, resolve_group_or_exit
from fintrack.domain.account import AccountService
from fintrack.domain.card_group import CardGroupService


@click.group()
def group_group():
    """Manage credit cards that share one credit limit."""
    pass


@group_group.command("create")
@click.argument("name", metavar="GROUP_NAME")
@click.option("--limit", "shared_limit", required=True, help="Shared credit limit")
@click.option("--debt", default="0", help="Debt on the group when tracking starts")
@click.pass_context
def create_group(ctx, name: str, shared_limit: str, debt: str):
    """Create a card group.

    Examples:
        fintrack group create "HDFC Cards" --limit 200000
    """
    service = CardGroupService(ctx.obj["store"])
    try:
        group = service.create_group(name, shared_limit, starting_balance=debt)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created card group '{group.name}' (ID: {group.id})")


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List card groups with their members and shared credit."""
    service = CardGroupService(ctx.obj["store"])

    groups = service.list_groups()
    if not groups:
        click.echo("No card groups found.")
        return

    for group in groups:
        summary = service.summary(group.id)
        click.echo(
            f"\n{group.name} (ID: {group.id}) | Limit: {format_money(group.shared_credit_limit)} | "
            f"Available: {format_money(summary.available)} | "
            f"Used: {format_percentage(summary.utilization)}"
        )
        members = service.members(group.id)
        if not members:
            click.echo("  (no cards)")
        for card in members:
            click.echo(f"  - {card.name}")


@group_group.command("add-card")
@click.argument("group", metavar="GROUP")
@click.argument("card", metavar="CARD")
@click.pass_context
def add_card(ctx, group: str, card: str):
    """Add a credit card to a group. GROUP and CARD can be names or IDs."""
    store = ctx.obj["store"]
    group_id = resolve_group_or_exit(ctx, CardGroupService(store), group)
    account_service = AccountService(store)
    account_id = resolve_account_or_exit(ctx, account_service, card)

    try:
        updated = account_service.assign_card_group(account_id, group_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added '{updated.name}' to group")


@group_group.command("remove-card")
@click.argument("card", metavar="CARD")
@click.pass_context
def remove_card(ctx, card: str):
    """Take a credit card out of its group."""
    account_service = AccountService(ctx.obj["store"])
    account_id = resolve_account_or_exit(ctx, account_service, card)
    updated = account_service.assign_card_group(account_id, None)
    click.echo(f"Removed '{updated.name}' from its group")


@group_group.command("delete")
@click.argument("group", metavar="GROUP")
@click.pass_context
def delete_group(ctx, group: str):
    """Delete a card group. Member cards are kept and ungrouped."""
    service = CardGroupService(ctx.obj["store"])
    group_id = resolve_group_or_exit(ctx, service, group)
    count = len(service.members(group_id))
    service.delete_group(group_id)
    click.echo(f"Deleted card group ({count} card(s) ungrouped)")


def register_commands(cli):
    """Register card group commands with CLI."""
    cli.add_command(group_group, name="group")
