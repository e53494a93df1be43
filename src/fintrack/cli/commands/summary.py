"""Monthly summary command."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_money, format_percentage
from fintrack.domain.category import resolve_category
from fintrack.domain.summary import UNCATEGORIZED, monthly_summary
from fintrack.utils.date_parser import parse_month


@click.command("summary")
@click.option("--month", help="Month to summarize: YYYY-MM, 'this month' or 'last month'")
@click.pass_context
def summary(ctx, month: str | None):
    """Show income, expenses and top spending categories for a month.

    Credit card payments are not counted as expenses.

    Examples:
        fintrack summary
        fintrack summary --month 2025-10
        fintrack summary --month "last month"
    """
    state = ctx.obj["store"].state
    try:
        month_start = parse_month(month)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    report = monthly_summary(state.transactions, month_start)

    click.echo(f"\nSummary for {month_start.strftime('%B %Y')}")
    click.echo("-" * 40)
    click.echo(f"Income:   {format_money(report.income):>16s}")
    click.echo(f"Expenses: {format_money(report.expense):>16s}")
    click.echo(f"Net:      {format_money(report.net):>16s}")

    if not report.top_categories:
        return

    click.echo("\nTop categories:")
    for share in report.top_categories:
        if share.category_id == UNCATEGORIZED:
            label = "❔ Uncategorized"
        else:
            category = resolve_category(share.category_id, state.custom_categories)
            label = f"{category.emoji} {category.name}"
        click.echo(
            f"  {label:25s} {format_money(share.amount):>14s}  {format_percentage(share.percentage):>6s}"
        )


def register_commands(cli):
    """Register summary command with CLI."""
    cli.add_command(summary)
