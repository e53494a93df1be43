"""Credit card overview command."""

import click
from fintrack.cli.formatting import format_money, format_percentage
from fintrack.domain.credit import card_summary, group_summary


@click.command("cards")
@click.pass_context
def cards(ctx):
    """Show debt, available credit and utilization of every credit card.

    Cards in a group share the group's limit and are listed under it.
    """
    state = ctx.obj["store"].state
    ledger = state.transactions
    card_list = [acc for acc in state.accounts if acc.is_credit_card]
    if not card_list and not state.card_groups:
        click.echo("No credit cards found.")
        return

    def echo_summary(label, summary):
        click.echo(
            f"{label:30s} | Owed: {format_money(summary.spent):>13s} | "
            f"Available: {format_money(summary.available):>13s} of {format_money(summary.limit):>13s} | "
            f"{format_percentage(summary.utilization):>6s}"
        )

    for group in state.card_groups:
        echo_summary(f"[{group.name}]", group_summary(group, state.accounts, ledger))
        for card in card_list:
            if card.card_group == group.id:
                click.echo(f"    {card.name}")

    for card in card_list:
        if card.card_group is None:
            echo_summary(card.name, card_summary(card, ledger))


def register_commands(cli):
    """Register cards command with CLI."""
    cli.add_command(cards)
