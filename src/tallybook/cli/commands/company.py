"""Company management commands."""

import click

from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import resolve_company_or_exit
from tallybook.domain.company import CompanyService


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("name")
@click.pass_context
def create_company(ctx, name: str):
    """Create a new company."""
    service = CompanyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        company_id = service.create_company(name)
        click.echo(f"Created company '{name.strip()}' (ID: {company_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    service = CompanyService(ctx.obj["db"], ctx.obj["owner_id"])
    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    for company in companies:
        click.echo(f"  ID: {company.id:3d} | {company.name}")


@company_group.command("rename")
@click.argument("company")
@click.argument("new_name")
@click.pass_context
def rename_company(ctx, company: str, new_name: str):
    """Rename a company (by name or ID)."""
    company_id = resolve_company_or_exit(ctx, company)
    service = CompanyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.rename_company(company_id, new_name)
        click.echo(f"Renamed company {company_id} to '{new_name.strip()}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@company_group.command("delete")
@click.argument("company")
@click.pass_context
def delete_company(ctx, company: str):
    """Delete a company (by name or ID) that no transaction uses."""
    company_id = resolve_company_or_exit(ctx, company)
    service = CompanyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.delete_company(company_id)
        click.echo(f"Deleted company {company_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register company commands with CLI."""
    cli.add_command(company_group, name="company")
