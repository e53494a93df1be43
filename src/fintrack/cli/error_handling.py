"""CLI error handling helpers."""

import click

from fintrack.domain.errors import DomainError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Storage errors get a hint on where the database location comes from.
    """
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, StorageError):
        click.echo(
            "Check the database path given by --db-path or FINTRACK_DB_PATH.", err=True
        )
    ctx.exit(1)
