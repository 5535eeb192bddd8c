"""Category management commands."""

import click

from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import resolve_category_or_exit
from tallybook.domain.category import CategoryService
from tallybook.domain.entities import TransactionKind

KIND_CHOICE = click.Choice(["income", "expense", "receita", "despesa"], case_sensitive=False)


@click.group()
def category_group():
    """Manage income and expense categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--type", "kind", type=KIND_CHOICE, required=True, help="Category type")
@click.pass_context
def create_category(ctx, name: str, kind: str):
    """Create a new category of one type."""
    service = CategoryService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        category_id = service.create_category(name, kind)
        click.echo(
            f"Created {TransactionKind.parse(kind).value} category '{name.strip()}' "
            f"(ID: {category_id})"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.option("--type", "kind", type=KIND_CHOICE, help="Only categories of this type")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List categories."""
    service = CategoryService(ctx.obj["db"], ctx.obj["owner_id"])
    categories = service.list_categories(kind)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for category in categories:
        click.echo(f"  ID: {category.id:3d} | {category.kind.value:7s} | {category.name}")


@category_group.command("rename")
@click.argument("category")
@click.argument("new_name")
@click.pass_context
def rename_category(ctx, category: str, new_name: str):
    """Rename a category (by name or ID)."""
    category_id = resolve_category_or_exit(ctx, category)
    service = CategoryService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.rename_category(category_id, new_name)
        click.echo(f"Renamed category {category_id} to '{new_name.strip()}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category (by name or ID) that no transaction uses."""
    category_id = resolve_category_or_exit(ctx, category)
    service = CategoryService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.delete_category(category_id)
        click.echo(f"Deleted category {category_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with CLI."""
    cli.add_command(category_group, name="category")
