"""Client (counterparty) management commands."""

import click

from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import resolve_client_or_exit
from tallybook.domain.counterparty import CounterpartyService


@click.group()
def client_group():
    """Manage clients and suppliers."""
    pass


@client_group.command("create")
@click.argument("name")
@click.pass_context
def create_client(ctx, name: str):
    """Create a new client."""
    service = CounterpartyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        client_id = service.create_counterparty(name)
        click.echo(f"Created client '{name.strip()}' (ID: {client_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@client_group.command("list")
@click.pass_context
def list_clients(ctx):
    """List all clients."""
    service = CounterpartyService(ctx.obj["db"], ctx.obj["owner_id"])
    clients = service.list_counterparties()
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    for client in clients:
        click.echo(f"  ID: {client.id:3d} | {client.name}")


@client_group.command("rename")
@click.argument("client")
@click.argument("new_name")
@click.pass_context
def rename_client(ctx, client: str, new_name: str):
    """Rename a client (by name or ID)."""
    client_id = resolve_client_or_exit(ctx, client)
    service = CounterpartyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.rename_counterparty(client_id, new_name)
        click.echo(f"Renamed client {client_id} to '{new_name.strip()}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@client_group.command("delete")
@click.argument("client")
@click.pass_context
def delete_client(ctx, client: str):
    """Delete a client (by name or ID) that no transaction uses."""
    client_id = resolve_client_or_exit(ctx, client)
    service = CounterpartyService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        service.delete_counterparty(client_id)
        click.echo(f"Deleted client {client_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register client commands with CLI."""
    cli.add_command(client_group, name="client")
