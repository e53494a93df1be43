"""Main CLI entry point."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.config import configure_logging
from fintrack.database.factories import create_sqlite_store
from fintrack.database.persistence import StorePersistence
from fintrack.domain.errors import StorageError
from fintrack.domain.store import TransactionStore

# Import and register all commands at module level
from fintrack.cli.commands import (
    account,
    budget,
    cards,
    category,
    group,
    sms,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Fintrack - Personal finance tracking.

    Track accounts, credit cards and budgets, and turn bank SMS alerts into
    transactions waiting for your confirmation.
    """
    ctx.ensure_object(dict)

    # Load state only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(verbose)
        try:
            blob_store = create_sqlite_store(database_path=db_path)
        except StorageError as e:
            handle_domain_error(ctx, e)
            return
        blob_store.connect()
        ctx.call_on_close(blob_store.disconnect)

        store = TransactionStore()
        persistence = StorePersistence(store, blob_store)
        persistence.start()

        ctx.obj["store"] = store
        ctx.obj["persistence"] = persistence


# Register all commands
account.register_commands(cli)
group.register_commands(cli)
transaction.register_commands(cli)
sms.register_commands(cli)
budget.register_commands(cli)
category.register_commands(cli)
cards.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
