"""Account management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_money
from fintrack.cli.resolution import resolve_account_or_exit
from fintrack.domain.account import AccountService

ACCOUNT_TYPES = ["bank", "credit-card", "cash", "other"]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    default="bank", show_default=True, help="Account type",
)
@click.option(
    "--balance", default="0",
    help="Opening balance, or money already owed for credit cards",
)
@click.option("--limit", "credit_limit", help="Credit limit (credit cards only)")
@click.option("--last4", help="Last four digits, used to match bank SMS")
@click.option("--currency", default="INR", show_default=True)
@click.pass_context
def create_account(
    ctx, name: str, account_type: str, balance: str, credit_limit: str | None,
    last4: str | None, currency: str,
):
    """Create a new account.

    For credit cards --balance is the debt on the card when you start
    tracking it, not a cash balance.

    Examples:
        fintrack account create "Axis Savings" --balance 25000 --last4 1234
        fintrack account create "HDFC Regalia" --type credit-card --limit 100000 --balance 2000
    """
    service = AccountService(ctx.obj["store"])

    try:
        acc = service.create_account(
            name=name,
            account_type=account_type,
            starting_balance=balance,
            credit_limit=credit_limit,
            last4_digits=last4,
            currency=currency,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account '{acc.name}' (ID: {acc.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balances.

    Credit cards show their available credit.
    """
    service = AccountService(ctx.obj["store"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        last4 = f"XX{acc.last4_digits}" if acc.last4_digits else ""
        balance = format_money(service.get_balance(acc.id), acc.currency)
        click.echo(
            f"ID: {acc.id} | {acc.name:20s} | {acc.type.value:11s} | {last4:6s} | {balance:>14s}"
        )
    click.echo("-" * 80)
    click.echo(f"Total: {format_money(service.total_balance())}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--balance", help="New opening balance (initial debt for credit cards)")
@click.option("--limit", "credit_limit", help="New credit limit")
@click.option("--last4", help="New last four digits")
@click.pass_context
def update_account(
    ctx, account: str, name: str | None, balance: str | None,
    credit_limit: str | None, last4: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID.

    Examples:
        fintrack account update "Axis Savings" --name "Axis Salary"
        fintrack account update "HDFC Regalia" --limit 150000
    """
    service = AccountService(ctx.obj["store"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.update_account(
            account_id,
            name=name,
            starting_balance=balance,
            credit_limit=credit_limit,
            last4_digits=last4,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated account '{updated.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account and all of its transactions.

    ACCOUNT can be an account name or ID.
    """
    service = AccountService(ctx.obj["store"])
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    if not yes:
        click.confirm(
            f"Delete account '{acc.name}' and all its transactions?", abort=True
        )

    removed = service.delete_account(account_id)
    click.echo(f"Deleted account '{acc.name}' and {removed} transaction(s)")


def register_commands(cli):
    """Register account commands with CLI."""
    cli.add_command(account_group, name="account")
