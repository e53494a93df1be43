"""SMS ingestion and pending transaction commands."""

from datetime import date

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_money, format_transaction
from fintrack.cli.resolution import resolve_account_or_exit
from fintrack.config import get_sms_senders
from fintrack.domain.account import AccountService
from fintrack.domain.entities import Notification
from fintrack.domain.ingestion import SmsIngestionService, is_allowed_sender
from fintrack.domain.notifications import Notifier
from fintrack.domain.sms_parser import SmsTransactionParser
from fintrack.domain.transaction import TransactionService
from fintrack.utils.date_parser import parse_date


class EchoNotifier(Notifier):
    """Prints notifications to the terminal."""

    def notify(self, notification: Notification) -> None:
        click.echo(f"[{notification.title}] {notification.body}")


@click.group()
def sms_group():
    """Turn bank SMS messages into transactions."""
    pass


@sms_group.command("parse")
@click.argument("sender")
@click.argument("body")
def parse_sms(sender: str, body: str):
    """Show what would be read from an SMS without saving anything.

    Examples:
        fintrack sms parse AX-AXISBK "INR 1,234.56 debited from A/c no. XX1234 on 23-11-25 UPI/P2M/123/JOHN DOE"
    """
    if not is_allowed_sender(sender, get_sms_senders()):
        click.echo(f"Sender '{sender}' is not an accepted bank sender")

    parsed = SmsTransactionParser().parse(sender, body)
    if parsed is None:
        click.echo("Not a transaction message.")
        return

    click.echo(f"Amount:   {format_money(parsed.amount)}")
    click.echo(f"Type:     {parsed.type.value}")
    click.echo(f"Date:     {parsed.date.isoformat()}")
    click.echo(f"Merchant: {parsed.merchant_name}")
    click.echo(f"Method:   {parsed.transaction_method or '-'}")
    click.echo(f"Card:     {'XX' + parsed.last4_digits if parsed.last4_digits else '-'}")


@sms_group.command("ingest")
@click.argument("sender")
@click.argument("body")
@click.option("--received", help="Date the SMS arrived, used when the text has none")
@click.pass_context
def ingest_sms(ctx, sender: str, body: str, received: str | None):
    """Process an incoming SMS into a pending transaction.

    Messages from other senders, OTPs and non-transaction texts are ignored,
    as are repeats of a transaction already known.
    """
    try:
        received_on = parse_date(received) if received else date.today()
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    service = SmsIngestionService(
        ctx.obj["store"], EchoNotifier(), allowed_senders=get_sms_senders()
    )
    pending = service.ingest(sender, body, received_on=received_on)
    if pending is None:
        click.echo("Ignored.")
        return
    click.echo(f"Pending transaction {pending.id} created")


@sms_group.command("pending")
@click.pass_context
def list_pending(ctx):
    """List transactions waiting for confirmation."""
    store = ctx.obj["store"]
    service = TransactionService(store)

    pending = service.list_pending()
    if not pending:
        click.echo("No pending transactions.")
        return

    for txn in pending:
        click.echo(format_transaction(txn, service.account_name(txn), store.state.custom_categories))


@sms_group.command("confirm")
@click.argument("pending_id")
@click.option("--category", help="Category ID to file it under")
@click.option("--account", help="Account name or ID (if not matched from the SMS)")
@click.option("--type", "txn_type", type=click.Choice(["income", "expense", "payment"], case_sensitive=False))
@click.option("--note", help="Note")
@click.pass_context
def confirm_pending(
    ctx, pending_id: str, category: str | None, account: str | None,
    txn_type: str | None, note: str | None,
):
    """Confirm a pending transaction, moving it into the ledger."""
    store = ctx.obj["store"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), account)

    service = TransactionService(store)
    try:
        txn = service.confirm_pending(
            pending_id, category=category, account_id=account_id, txn_type=txn_type, note=note
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Confirmed transaction {txn.id}")


@sms_group.command("discard")
@click.argument("pending_id")
@click.pass_context
def discard_pending(ctx, pending_id: str):
    """Drop a pending transaction."""
    service = TransactionService(ctx.obj["store"])
    try:
        service.discard_pending(pending_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Discarded pending transaction {pending_id}")


@sms_group.command("import-statement")
@click.argument("statement_file", type=click.File("r", encoding="utf-8"))
@click.option("--account", required=True, help="Account name or ID the statement belongs to")
@click.pass_context
def import_statement(ctx, statement_file, account: str):
    """Import transactions from the text of a bank statement.

    STATEMENT_FILE is plain text extracted from the statement PDF.
    """
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, AccountService(store), account)

    result = TransactionService(store).import_statement(statement_file.read(), account_id)
    click.echo(f"Imported {result['imported']} transaction(s), skipped {result['skipped']} duplicate(s)")


def register_commands(cli):
    """Register SMS commands with CLI."""
    cli.add_command(sms_group, name="sms")
