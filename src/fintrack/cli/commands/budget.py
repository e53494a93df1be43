"""Budget commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.formatting import format_money, format_percentage
from fintrack.database.persistence import load_alert_tracker, save_alert_tracker
from fintrack.domain.budget import BudgetService
from fintrack.domain.category import resolve_category

STATE_LABELS = {
    "OK": "ok",
    "NEAR_LIMIT": "near limit",
    "OVER_BUDGET": "OVER BUDGET",
}


@click.group()
def budget_group():
    """Manage monthly category budgets."""
    pass


@budget_group.command("set")
@click.argument("category_id")
@click.argument("amount")
@click.option(
    "--alert-at", "alert_threshold", type=int, default=80, show_default=True,
    help="Percentage of the budget that triggers an alert",
)
@click.pass_context
def set_budget(ctx, category_id: str, amount: str, alert_threshold: int):
    """Set the monthly budget for a category.

    Examples:
        fintrack budget set food_dining 8000
        fintrack budget set shopping 5000 --alert-at 90
    """
    service = BudgetService(ctx.obj["store"])
    try:
        budget = service.set_budget(category_id, amount, alert_threshold=alert_threshold)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Budget for '{category_id}' set to {format_money(budget.amount)}")


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List budgets."""
    store = ctx.obj["store"]
    budgets = BudgetService(store).list_budgets()
    if not budgets:
        click.echo("No budgets set.")
        return

    for budget in budgets:
        category = resolve_category(budget.category_id, store.state.custom_categories)
        click.echo(
            f"{category.emoji} {category.name:20s} | {format_money(budget.amount):>12s} | "
            f"alert at {budget.alert_threshold}%"
        )


@budget_group.command("status")
@click.pass_context
def budget_status(ctx):
    """Show this month's spending against each budget.

    A budget is announced once when it crosses its alert threshold and once
    more when it goes over budget, not on every run.
    """
    store = ctx.obj["store"]
    statuses = BudgetService(store).evaluate_all()
    if not statuses:
        click.echo("No budgets set.")
        return

    custom = store.state.custom_categories
    for status in statuses:
        category = resolve_category(status.budget.category_id, custom)
        click.echo(
            f"{category.emoji} {category.name:20s} | {format_money(status.spent):>12s} of "
            f"{format_money(status.budget.amount):>12s} | {format_percentage(status.percentage):>7s} | "
            f"{STATE_LABELS[status.state.value]}"
        )

    blob_store = ctx.obj["persistence"].blob_store
    tracker = load_alert_tracker(blob_store)
    for notification in tracker.check(statuses, custom):
        click.echo(f"\n[{notification.title}] {notification.body}")
    save_alert_tracker(blob_store, tracker)


@budget_group.command("delete")
@click.argument("category_id")
@click.pass_context
def delete_budget(ctx, category_id: str):
    """Remove the budget of a category."""
    service = BudgetService(ctx.obj["store"])
    budget = service.get_budget_for_category(category_id)
    if budget is None:
        click.echo(f"Error: No budget set for '{category_id}'", err=True)
        ctx.exit(1)
    service.delete_budget(budget.id)
    click.echo(f"Removed budget for '{category_id}'")


def register_commands(cli):
    """Register budget commands with CLI."""
    cli.add_command(budget_group, name="budget")
