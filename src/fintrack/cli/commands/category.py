"""Category commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import CategoryType

CATEGORY_TYPES = ["income", "expense"]


def _echo_categories(categories) -> None:
    for cat in categories:
        marker = " (custom)" if cat.is_custom else ""
        click.echo(f"{cat.emoji} {cat.id:22s} | {cat.name:25s} | {cat.type.value.lower()}{marker}")


@click.group()
def category_group():
    """Browse and manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES, case_sensitive=False))
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List predefined and custom categories."""
    service = CategoryService(ctx.obj["store"])
    parsed_type = CategoryType(category_type.upper()) if category_type else None
    _echo_categories(service.list_categories(parsed_type))


@category_group.command("search")
@click.argument("query")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES, case_sensitive=False))
@click.pass_context
def search_categories(ctx, query: str, category_type: str | None):
    """Search categories by name or emoji."""
    service = CategoryService(ctx.obj["store"])
    parsed_type = CategoryType(category_type.upper()) if category_type else None
    matches = service.search(query, parsed_type)
    if not matches:
        click.echo("No matching categories.")
        return
    _echo_categories(matches)


@category_group.command("create")
@click.argument("name")
@click.option("--emoji", default="🌟", show_default=True)
@click.option("--color", default="#B2BEC3", show_default=True, help="Hex color")
@click.option(
    "--type", "category_type", type=click.Choice(CATEGORY_TYPES, case_sensitive=False),
    default="expense", show_default=True,
)
@click.pass_context
def create_category(ctx, name: str, emoji: str, color: str, category_type: str):
    """Create a custom category.

    Examples:
        fintrack category create "Pet Care" --emoji 🐕
        fintrack category create "Side Project" --type income --emoji 🛠️
    """
    service = CategoryService(ctx.obj["store"])
    try:
        category = service.create_category(
            name, emoji=emoji, color=color, category_type=CategoryType(category_type.upper())
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("disable")
@click.argument("category_id")
@click.pass_context
def disable_category(ctx, category_id: str):
    """Hide a custom category from listings without deleting it."""
    try:
        CategoryService(ctx.obj["store"]).set_active(category_id, False)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Disabled category {category_id}")


@category_group.command("enable")
@click.argument("category_id")
@click.pass_context
def enable_category(ctx, category_id: str):
    """Show a disabled custom category again."""
    try:
        CategoryService(ctx.obj["store"]).set_active(category_id, True)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Enabled category {category_id}")


@category_group.command("delete")
@click.argument("category_id")
@click.pass_context
def delete_category(ctx, category_id: str):
    """Delete a custom category. Predefined categories cannot be deleted."""
    try:
        CategoryService(ctx.obj["store"]).delete_category(category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with CLI."""
    cli.add_command(category_group, name="category")
