"""Transaction management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_transaction
from fintrack.cli.resolution import resolve_account_or_exit
from fintrack.domain.account import AccountService
from fintrack.domain.transaction import TransactionService
from fintrack.utils.date_parser import parse_date

TRANSACTION_TYPES = ["income", "expense", "payment"]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", help="Account name or ID")
@click.option("--amount", required=True, help="Amount (always positive)")
@click.option(
    "--type", "txn_type", type=click.Choice(TRANSACTION_TYPES, case_sensitive=False),
    default="expense", show_default=True,
    help="payment pays off credit card debt",
)
@click.option("--date", "txn_date", help="Date (defaults to today)")
@click.option("--category", help="Category ID (e.g. food_dining, salary)")
@click.option("--note", help="Free-form note")
@click.option("--merchant", help="Merchant name")
@click.option("--location", help="Where the transaction happened")
@click.pass_context
def add_transaction(
    ctx, account: str | None, amount: str, txn_type: str, txn_date: str | None,
    category: str | None, note: str | None, merchant: str | None, location: str | None,
):
    """Add a transaction.

    Examples:
        fintrack transaction add --account "Axis Savings" --amount 450 --category food_dining
        fintrack transaction add --account "HDFC Regalia" --amount 5000 --type payment
        fintrack transaction add --amount 75000 --type income --category salary --date 2025-11-01
    """
    store = ctx.obj["store"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), account)

    service = TransactionService(store)
    try:
        parsed_date = parse_date(txn_date) if txn_date else None
        txn = service.create_transaction(
            account_id=account_id,
            amount=amount,
            txn_type=txn_type,
            txn_date=parsed_date,
            category=category,
            note=note,
            location=location,
            merchant_name=merchant,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added {txn.type.value} of {txn.amount} (ID: {txn.id})")


@transaction_group.command("list")
@click.option("--account", help="Only this account (name or ID)")
@click.option("--category", help="Only this category ID")
@click.option("--start-date", help="Start date (inclusive)")
@click.option("--end-date", help="End date (inclusive)")
@click.option("--oldest-first", is_flag=True, help="Sort by date, oldest first")
@click.pass_context
def list_transactions(
    ctx, account: str | None, category: str | None, start_date: str | None,
    end_date: str | None, oldest_first: bool,
):
    """List transactions, most recently added first."""
    store = ctx.obj["store"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), account)

    service = TransactionService(store)
    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    transactions = service.list_transactions(
        start_date=start, end_date=end, account_id=account_id,
        category=category, chronological=oldest_first,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    custom = store.state.custom_categories
    for txn in transactions:
        click.echo(format_transaction(txn, service.account_name(txn), custom))
    click.echo(f"\n{len(transactions)} transaction(s)")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--account", help="Move to this account (name or ID)")
@click.option("--amount", help="New amount")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES, case_sensitive=False))
@click.option("--date", "txn_date", help="New date")
@click.option("--category", help="New category ID")
@click.option("--note", help="New note")
@click.pass_context
def update_transaction(
    ctx, transaction_id: str, account: str | None, amount: str | None, txn_type: str | None,
    txn_date: str | None, category: str | None, note: str | None,
):
    """Update a transaction."""
    store = ctx.obj["store"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), account)

    service = TransactionService(store)
    try:
        parsed_date = parse_date(txn_date) if txn_date else None
        service.update_transaction(
            transaction_id,
            account_id=account_id,
            amount=amount,
            txn_type=txn_type,
            txn_date=parsed_date,
            category=category,
            note=note,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str):
    """Delete a transaction."""
    service = TransactionService(ctx.obj["store"])
    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with CLI."""
    cli.add_command(transaction_group, name="transaction")
